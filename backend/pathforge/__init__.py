# PathForge backend
