"""
Project suggestion catalogue.

Curated ideas per domain with interview-impact metadata. Loaded into
``project_suggestions`` by ``seed_project_suggestions`` (run via
``python scripts/seed_projects.py`` or automatically on an empty table).
"""
from typing import Any, Dict, List

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from pathforge.core.logging_config import logger
from pathforge.models.project_suggestion import ProjectSuggestion, ProjectDifficulty


PROJECT_SUGGESTIONS: List[Dict[str, Any]] = [
    # Web development
    {
        "title": "AI-Powered Resume Analyzer",
        "domain": "Web Development",
        "problem_statement": "Generic resumes fail ATS systems and don't highlight key skills effectively. Job seekers need AI-driven feedback to optimize resumes for specific roles.",
        "real_world_application": "Used by job portals like LinkedIn, HR tech startups, and career coaching platforms",
        "interview_impact_score": 8,
        "why_interviewers_like": [
            "Demonstrates AI integration with web applications",
            "Shows understanding of file parsing and NLP",
            "Practical business application with clear value"
        ],
        "difficulty": "Intermediate",
        "recommended_years": ["2nd Year", "3rd Year", "4th Year"],
        "tech_stack": ["React", "Node.js", "Python", "NLP", "PDF parsing"]
    },
    {
        "title": "Real-Time Collaborative Code Editor",
        "domain": "Web Development",
        "problem_statement": "Remote teams need live collaboration tools for pair programming and code reviews. Traditional editors lack real-time sync and multiplayer support.",
        "real_world_application": "Powers products like CodeSandbox, Replit, and VS Code Live Share",
        "interview_impact_score": 9,
        "why_interviewers_like": [
            "Demonstrates WebSocket/real-time communication expertise",
            "Shows system design thinking (concurrency, conflict resolution)",
            "Complex frontend state management"
        ],
        "difficulty": "Advanced",
        "recommended_years": ["3rd Year", "4th Year"],
        "tech_stack": ["React", "WebSocket", "Node.js", "Monaco Editor", "CRDT"]
    },
    {
        "title": "Smart Expense Tracker with Receipt Scanner",
        "domain": "Web Development",
        "problem_statement": "Manual expense tracking is tedious and error-prone. Users need automated extraction of data from receipts using OCR and smart categorization.",
        "real_world_application": "Used in personal finance apps, corporate expense management, accounting software",
        "interview_impact_score": 7,
        "why_interviewers_like": [
            "Combines OCR/image processing with web development",
            "Shows data visualization and analytics skills",
            "Addresses real user pain point"
        ],
        "difficulty": "Intermediate",
        "recommended_years": ["2nd Year", "3rd Year", "4th Year"],
        "tech_stack": ["React", "Node.js", "OCR API", "Chart.js", "MongoDB"]
    },
    {
        "title": "Social Media Content Scheduler with Analytics",
        "domain": "Web Development",
        "problem_statement": "Creators and marketers struggle to maintain consistent posting across platforms. Need automated scheduling with performance analytics.",
        "real_world_application": "Powers tools like Buffer, Hootsuite, Later for social media management",
        "interview_impact_score": 6,
        "why_interviewers_like": [
            "Shows API integration with multiple platforms",
            "Demonstrates cron jobs and background processing",
            "Analytics and data visualization"
        ],
        "difficulty": "Intermediate",
        "recommended_years": ["2nd Year", "3rd Year", "4th Year"],
        "tech_stack": ["React", "Node.js", "Social Media APIs", "Cron", "Analytics"]
    },
    {
        "title": "Voice-Controlled Task Manager",
        "domain": "Web Development",
        "problem_statement": "Traditional task managers require manual input. Busy professionals need hands-free task management using voice commands.",
        "real_world_application": "Integrated into productivity apps, smart assistants, accessibility tools",
        "interview_impact_score": 7,
        "why_interviewers_like": [
            "Shows speech recognition integration",
            "Demonstrates accessibility awareness",
            "Modern user experience innovation"
        ],
        "difficulty": "Intermediate",
        "recommended_years": ["2nd Year", "3rd Year", "4th Year"],
        "tech_stack": ["React", "Web Speech API", "Node.js", "NLP", "MongoDB"]
    },

    # Machine learning
    {
        "title": "Fake News Detection System",
        "domain": "Machine Learning",
        "problem_statement": "Misinformation spreads rapidly on social media. Platforms need automated systems to detect and flag potentially fake news articles.",
        "real_world_application": "Used by Facebook, Twitter, news aggregators for content moderation",
        "interview_impact_score": 8,
        "why_interviewers_like": [
            "Demonstrates NLP and text classification skills",
            "Shows understanding of model deployment",
            "Addresses critical real-world problem"
        ],
        "difficulty": "Intermediate",
        "recommended_years": ["2nd Year", "3rd Year", "4th Year"],
        "tech_stack": ["Python", "TensorFlow", "NLP", "Flask", "BeautifulSoup"]
    },
    {
        "title": "Disease Prediction from Medical Images",
        "domain": "Machine Learning",
        "problem_statement": "Early disease detection requires expert radiologists. AI can assist in screening X-rays and MRIs for abnormalities at scale.",
        "real_world_application": "Used in hospitals, diagnostic centers, telemedicine platforms",
        "interview_impact_score": 9,
        "why_interviewers_like": [
            "Shows computer vision and deep learning expertise",
            "Healthcare AI is highly valued in industry",
            "Demonstrates model evaluation and ethics awareness"
        ],
        "difficulty": "Advanced",
        "recommended_years": ["3rd Year", "4th Year"],
        "tech_stack": ["Python", "PyTorch", "CNN", "Medical datasets", "Flask"]
    },
    {
        "title": "Customer Churn Prediction",
        "domain": "Machine Learning",
        "problem_statement": "Businesses lose revenue when customers leave. Predictive models can identify at-risk customers for targeted retention campaigns.",
        "real_world_application": "Used by telecom, SaaS companies, e-commerce for customer retention",
        "interview_impact_score": 7,
        "why_interviewers_like": [
            "Shows business impact understanding",
            "Demonstrates feature engineering skills",
            "Practical ML application with ROI"
        ],
        "difficulty": "Intermediate",
        "recommended_years": ["2nd Year", "3rd Year", "4th Year"],
        "tech_stack": ["Python", "Scikit-learn", "Pandas", "XGBoost", "Flask"]
    },
    {
        "title": "Sentiment Analysis Dashboard for Product Reviews",
        "domain": "Machine Learning",
        "problem_statement": "E-commerce platforms receive thousands of reviews daily. Automated sentiment analysis helps businesses understand customer feedback at scale.",
        "real_world_application": "Used by Amazon, Flipkart, product analytics platforms",
        "interview_impact_score": 7,
        "why_interviewers_like": [
            "Combines NLP with data visualization",
            "Shows end-to-end ML pipeline",
            "Real-time processing capability"
        ],
        "difficulty": "Intermediate",
        "recommended_years": ["2nd Year", "3rd Year", "4th Year"],
        "tech_stack": ["Python", "NLP", "Dash/Streamlit", "MongoDB", "APIs"]
    },

    # Artificial intelligence
    {
        "title": "AI-Powered Interview Coach",
        "domain": "Artificial Intelligence",
        "problem_statement": "Job seekers struggle with interview preparation. An AI coach can provide personalized feedback on answers, body language, and communication.",
        "real_world_application": "Used by career platforms, universities, corporate training programs",
        "interview_impact_score": 8,
        "why_interviewers_like": [
            "Shows multi-modal AI (speech + vision)",
            "Demonstrates conversational AI skills",
            "Highly relevant to interview process itself"
        ],
        "difficulty": "Advanced",
        "recommended_years": ["3rd Year", "4th Year"],
        "tech_stack": ["Python", "OpenAI API", "Speech-to-text", "Computer Vision", "React"]
    },
    {
        "title": "Smart Study Assistant with Personalized Learning",
        "domain": "Artificial Intelligence",
        "problem_statement": "Students learn at different paces. An AI assistant can create personalized study plans and explain concepts based on learning style.",
        "real_world_application": "EdTech platforms like Duolingo, Khan Academy use adaptive learning",
        "interview_impact_score": 8,
        "why_interviewers_like": [
            "Shows AI in education (growing field)",
            "Demonstrates recommendation systems",
            "Personalization and user modeling"
        ],
        "difficulty": "Advanced",
        "recommended_years": ["3rd Year", "4th Year"],
        "tech_stack": ["Python", "NLP", "Recommendation Systems", "React", "MongoDB"]
    },
    {
        "title": "Automated Code Review Assistant",
        "domain": "Artificial Intelligence",
        "problem_statement": "Code reviews are time-consuming. AI can automatically detect bugs, security issues, and suggest improvements in pull requests.",
        "real_world_application": "GitHub Copilot, DeepCode, code quality tools",
        "interview_impact_score": 9,
        "why_interviewers_like": [
            "Shows understanding of software engineering + AI",
            "Highly practical for tech companies",
            "Demonstrates static analysis and ML"
        ],
        "difficulty": "Advanced",
        "recommended_years": ["3rd Year", "4th Year"],
        "tech_stack": ["Python", "AST parsing", "LLMs", "Git APIs", "Pattern matching"]
    },

    # Data science
    {
        "title": "Sales Forecasting Dashboard",
        "domain": "Data Science",
        "problem_statement": "Businesses need accurate sales predictions for inventory and resource planning. Historical data analysis can reveal trends and seasonality.",
        "real_world_application": "Used by retail, e-commerce, manufacturing for demand planning",
        "interview_impact_score": 7,
        "why_interviewers_like": [
            "Shows time-series analysis skills",
            "Business-focused data science",
            "Interactive visualization"
        ],
        "difficulty": "Intermediate",
        "recommended_years": ["2nd Year", "3rd Year", "4th Year"],
        "tech_stack": ["Python", "Prophet/ARIMA", "Pandas", "Plotly", "SQL"]
    },
    {
        "title": "Social Media Trend Analyzer",
        "domain": "Data Science",
        "problem_statement": "Brands and marketers need real-time insights into trending topics, hashtags, and viral content to stay relevant.",
        "real_world_application": "Marketing agencies, social listening tools, brand management",
        "interview_impact_score": 6,
        "why_interviewers_like": [
            "Shows API integration and data collection",
            "Real-time data processing",
            "Network analysis and visualization"
        ],
        "difficulty": "Intermediate",
        "recommended_years": ["2nd Year", "3rd Year", "4th Year"],
        "tech_stack": ["Python", "Twitter API", "NLP", "Graph analytics", "Dash"]
    },
    {
        "title": "Healthcare Data Analytics Platform",
        "domain": "Data Science",
        "problem_statement": "Hospitals generate massive data but lack insights. Analytics can optimize operations, reduce readmissions, and improve patient outcomes.",
        "real_world_application": "Hospital management systems, health insurance, clinical research",
        "interview_impact_score": 8,
        "why_interviewers_like": [
            "Healthcare analytics is high-value domain",
            "Shows data privacy and ethics awareness",
            "Complex data wrangling and visualization"
        ],
        "difficulty": "Advanced",
        "recommended_years": ["3rd Year", "4th Year"],
        "tech_stack": ["Python", "Pandas", "SQL", "Tableau/PowerBI", "Statistical analysis"]
    },

    # Cyber security
    {
        "title": "Network Intrusion Detection System",
        "domain": "Cyber Security",
        "problem_statement": "Organizations face constant cyber threats. Real-time network monitoring can detect anomalies and prevent attacks.",
        "real_world_application": "Used in enterprise security, firewalls, SOC (Security Operations Centers)",
        "interview_impact_score": 8,
        "why_interviewers_like": [
            "Shows understanding of network security",
            "ML applied to cybersecurity (hot field)",
            "Real-time threat detection"
        ],
        "difficulty": "Advanced",
        "recommended_years": ["3rd Year", "4th Year"],
        "tech_stack": ["Python", "ML", "Wireshark", "Scapy", "Anomaly detection"]
    },
    {
        "title": "Password Strength Analyzer with Breach Check",
        "domain": "Cyber Security",
        "problem_statement": "Weak passwords lead to account breaches. Users need real-time feedback on password strength and breach history.",
        "real_world_application": "Integrated into authentication systems, password managers",
        "interview_impact_score": 6,
        "why_interviewers_like": [
            "Shows cryptography and security fundamentals",
            "API integration (HaveIBeenPwned)",
            "User-facing security tool"
        ],
        "difficulty": "Beginner-friendly",
        "recommended_years": ["1st Year", "2nd Year", "3rd Year"],
        "tech_stack": ["JavaScript", "Node.js", "Crypto libraries", "APIs", "React"]
    },
    {
        "title": "Phishing Email Detector",
        "domain": "Cyber Security",
        "problem_statement": "Phishing attacks are the #1 entry point for breaches. Automated detection can flag suspicious emails before users click malicious links.",
        "real_world_application": "Email security gateways, Gmail/Outlook protection, SOC tools",
        "interview_impact_score": 7,
        "why_interviewers_like": [
            "Combines ML with cybersecurity",
            "Addresses major enterprise pain point",
            "NLP and pattern recognition"
        ],
        "difficulty": "Intermediate",
        "recommended_years": ["2nd Year", "3rd Year", "4th Year"],
        "tech_stack": ["Python", "NLP", "ML", "Email parsing", "Feature engineering"]
    },

    # Blockchain
    {
        "title": "Decentralized Voting System",
        "domain": "Blockchain",
        "problem_statement": "Traditional voting systems are vulnerable to fraud and lack transparency. Blockchain ensures tamper-proof, verifiable elections.",
        "real_world_application": "Government elections, corporate governance, community decision-making",
        "interview_impact_score": 8,
        "why_interviewers_like": [
            "Shows blockchain fundamentals",
            "Smart contract development",
            "Addresses trust and transparency"
        ],
        "difficulty": "Intermediate",
        "recommended_years": ["2nd Year", "3rd Year", "4th Year"],
        "tech_stack": ["Solidity", "Ethereum", "Web3.js", "React", "IPFS"]
    },
    {
        "title": "Supply Chain Transparency Platform",
        "domain": "Blockchain",
        "problem_statement": "Consumers want to verify product authenticity and ethical sourcing. Blockchain provides end-to-end supply chain visibility.",
        "real_world_application": "Used in food safety, pharma, luxury goods, fair trade",
        "interview_impact_score": 9,
        "why_interviewers_like": [
            "Real-world blockchain use case (not crypto speculation)",
            "Shows enterprise blockchain understanding",
            "IoT + Blockchain integration"
        ],
        "difficulty": "Advanced",
        "recommended_years": ["3rd Year", "4th Year"],
        "tech_stack": ["Hyperledger", "Smart Contracts", "IoT sensors", "React", "APIs"]
    },
    {
        "title": "NFT Marketplace for Digital Art",
        "domain": "Blockchain",
        "problem_statement": "Digital artists struggle to monetize work. NFTs enable ownership, royalties, and a marketplace for digital creations.",
        "real_world_application": "OpenSea, Rarible, Foundation - billion-dollar NFT platforms",
        "interview_impact_score": 7,
        "why_interviewers_like": [
            "Shows understanding of NFT standards (ERC-721)",
            "Full-stack blockchain development",
            "Wallet integration and payments"
        ],
        "difficulty": "Intermediate",
        "recommended_years": ["2nd Year", "3rd Year", "4th Year"],
        "tech_stack": ["Solidity", "Web3.js", "IPFS", "React", "Metamask"]
    },

    # IoT
    {
        "title": "Smart Home Automation System",
        "domain": "IoT",
        "problem_statement": "Home devices lack intelligent coordination. IoT can automate lighting, climate, security based on user behavior and sensors.",
        "real_world_application": "Google Home, Alexa ecosystem, smart home products",
        "interview_impact_score": 7,
        "why_interviewers_like": [
            "Shows IoT architecture understanding",
            "Sensor integration and automation",
            "Mobile app + hardware integration"
        ],
        "difficulty": "Intermediate",
        "recommended_years": ["2nd Year", "3rd Year", "4th Year"],
        "tech_stack": ["Arduino/Raspberry Pi", "MQTT", "Node.js", "React Native", "Sensors"]
    },
    {
        "title": "Air Quality Monitoring Network",
        "domain": "IoT",
        "problem_statement": "Air pollution affects public health but monitoring is limited. Distributed IoT sensors can provide real-time air quality maps.",
        "real_world_application": "Smart cities, environmental agencies, public health monitoring",
        "interview_impact_score": 8,
        "why_interviewers_like": [
            "Shows social impact and sustainability focus",
            "Distributed systems and data aggregation",
            "Real-time dashboards and alerts"
        ],
        "difficulty": "Intermediate",
        "recommended_years": ["2nd Year", "3rd Year", "4th Year"],
        "tech_stack": ["Raspberry Pi", "Sensors", "MQTT", "InfluxDB", "Grafana"]
    },
    {
        "title": "Predictive Maintenance for Industrial Equipment",
        "domain": "IoT",
        "problem_statement": "Equipment failures cause costly downtime. IoT sensors + ML can predict failures before they happen.",
        "real_world_application": "Manufacturing, aviation, energy - Industry 4.0",
        "interview_impact_score": 9,
        "why_interviewers_like": [
            "Combines IoT with ML (highly valued)",
            "Shows understanding of industrial applications",
            "Predictive analytics and anomaly detection"
        ],
        "difficulty": "Advanced",
        "recommended_years": ["3rd Year", "4th Year"],
        "tech_stack": ["IoT sensors", "Python", "ML", "Time-series DB", "Edge computing"]
    },

    # Cloud / DevOps
    {
        "title": "Auto-Scaling Microservices Platform",
        "domain": "Cloud / DevOps",
        "problem_statement": "Applications face variable traffic. Manual scaling is slow and costly. Automated orchestration optimizes resources based on demand.",
        "real_world_application": "AWS, Azure, GCP - foundation of cloud computing",
        "interview_impact_score": 9,
        "why_interviewers_like": [
            "Shows cloud architecture expertise",
            "Kubernetes and containerization",
            "System design and scalability thinking"
        ],
        "difficulty": "Advanced",
        "recommended_years": ["3rd Year", "4th Year"],
        "tech_stack": ["Docker", "Kubernetes", "AWS/GCP", "Monitoring", "Load balancers"]
    },
    {
        "title": "CI/CD Pipeline with Automated Testing",
        "domain": "Cloud / DevOps",
        "problem_statement": "Manual deployments are error-prone and slow. Automated pipelines enable rapid, reliable software delivery.",
        "real_world_application": "Every tech company uses CI/CD - Jenkins, GitHub Actions, GitLab CI",
        "interview_impact_score": 8,
        "why_interviewers_like": [
            "Shows software engineering best practices",
            "Automation and testing mindset",
            "DevOps is critical for all companies"
        ],
        "difficulty": "Intermediate",
        "recommended_years": ["2nd Year", "3rd Year", "4th Year"],
        "tech_stack": ["Jenkins/GitHub Actions", "Docker", "Testing frameworks", "Git", "AWS/Azure"]
    },
    {
        "title": "Infrastructure Monitoring and Alerting System",
        "domain": "Cloud / DevOps",
        "problem_statement": "Downtime costs millions. Real-time monitoring with intelligent alerting prevents outages and ensures SLA compliance.",
        "real_world_application": "Datadog, New Relic, Prometheus - every production system needs this",
        "interview_impact_score": 8,
        "why_interviewers_like": [
            "Shows observability and SRE principles",
            "Critical for production systems",
            "Metrics, logs, traces - full monitoring stack"
        ],
        "difficulty": "Advanced",
        "recommended_years": ["3rd Year", "4th Year"],
        "tech_stack": ["Prometheus", "Grafana", "ELK Stack", "Cloud platforms", "Alerting"]
    },

    # App development
    {
        "title": "AI-Powered Fitness Trainer App",
        "domain": "App Development",
        "problem_statement": "Personal trainers are expensive. An AI-powered app can provide personalized workout plans, form correction using camera, and progress tracking.",
        "real_world_application": "Fitness apps like Freeletics, Nike Training Club use AI coaching",
        "interview_impact_score": 7,
        "why_interviewers_like": [
            "Shows mobile AI integration",
            "Computer vision for pose detection",
            "Health tech is booming sector"
        ],
        "difficulty": "Advanced",
        "recommended_years": ["3rd Year", "4th Year"],
        "tech_stack": ["React Native/Flutter", "TensorFlow Lite", "Computer Vision", "Firebase", "APIs"]
    },
    {
        "title": "Language Learning App with Speech Recognition",
        "domain": "App Development",
        "problem_statement": "Traditional language learning lacks speaking practice. Speech recognition enables conversational practice and pronunciation feedback.",
        "real_world_application": "Duolingo, Babbel use AI for language learning",
        "interview_impact_score": 8,
        "why_interviewers_like": [
            "Shows speech processing integration",
            "Gamification and UX thinking",
            "Growing EdTech market"
        ],
        "difficulty": "Intermediate",
        "recommended_years": ["2nd Year", "3rd Year", "4th Year"],
        "tech_stack": ["React Native", "Speech-to-text", "Firebase", "Gamification", "APIs"]
    },
    {
        "title": "Mental Health Companion with Mood Tracking",
        "domain": "App Development",
        "problem_statement": "Mental health support is often inaccessible. An app can provide mood tracking, meditation, journaling, and AI-powered insights.",
        "real_world_application": "Apps like Calm, Headspace, Wysa serve millions of users",
        "interview_impact_score": 7,
        "why_interviewers_like": [
            "Shows empathy and social impact focus",
            "Data visualization and analytics",
            "Mental health tech is growing rapidly"
        ],
        "difficulty": "Intermediate",
        "recommended_years": ["2nd Year", "3rd Year", "4th Year"],
        "tech_stack": ["React Native/Flutter", "Charts", "NLP", "Firebase", "Push notifications"]
    }
]


async def seed_project_suggestions(db: AsyncSession, replace: bool = True) -> int:
    """
    Load the catalogue into the database.

    With ``replace`` the existing rows are cleared first, otherwise the
    catalogue is only loaded into an empty table. Returns rows inserted.
    """
    if replace:
        await db.execute(delete(ProjectSuggestion))
    else:
        existing = await db.scalar(select(func.count()).select_from(ProjectSuggestion))
        if existing:
            return 0

    for entry in PROJECT_SUGGESTIONS:
        db.add(ProjectSuggestion(
            **{**entry, "difficulty": ProjectDifficulty(entry["difficulty"])}
        ))

    await db.commit()
    logger.info(f"Seeded {len(PROJECT_SUGGESTIONS)} project suggestions")
    return len(PROJECT_SUGGESTIONS)
