# --- Configuration --------------------------------------------------------------------------------
#
# Statically authored assessment content: the twelve business domains, the base question bank,
# the conditional follow-up bank and the per-business-model rule profiles.
# Loaded once at process start by `catalog.load_catalog` and `profiles.load_profiles`.

DOMAINS = [
    {
        "id": "strategic-alignment",
        "title": "Strategic Alignment & Vision",
        "description": "Vision clarity, strategic priority alignment, and market positioning.",
        "trigger_threshold": 4,
    },
    {
        "id": "financial-management",
        "title": "Financial Management",
        "description": "Cash flow visibility, budgeting discipline, and financial controls.",
        "trigger_threshold": 4,
    },
    {
        "id": "revenue-engine",
        "title": "Revenue Engine",
        "description": "Revenue predictability, acquisition efficiency, and pipeline health.",
        "trigger_threshold": 4,
    },
    {
        "id": "operational-excellence",
        "title": "Operational Excellence",
        "description": "Process documentation, efficiency, and scalability of operations.",
        "trigger_threshold": 4,
    },
    {
        "id": "people-organization",
        "title": "People & Organization",
        "description": "Talent, culture, leadership depth, and organizational design.",
        "trigger_threshold": 4,
    },
    {
        "id": "technology-data",
        "title": "Technology & Data",
        "description": "Platform scalability, data quality, and technical debt.",
        "trigger_threshold": 4,
    },
    {
        "id": "customer-experience",
        "title": "Customer Experience",
        "description": "Customer satisfaction, product-market fit, and service quality.",
        "trigger_threshold": 4,
    },
    {
        "id": "supply-chain",
        "title": "Supply Chain",
        "description": "Supplier reliability, inventory, and sourcing resilience.",
        "trigger_threshold": 4,
    },
    {
        "id": "risk-compliance",
        "title": "Risk & Compliance",
        "description": "Risk identification, regulatory compliance, and business continuity.",
        # Compliance concerns are probed earlier than elsewhere.
        "trigger_threshold": 3,
    },
    {
        "id": "partnerships",
        "title": "Partnerships",
        "description": "Partner value, ecosystem integration, and alliance management.",
        "trigger_threshold": 4,
    },
    {
        "id": "customer-success",
        "title": "Customer Success",
        "description": "Customer lifecycle, health monitoring, retention, and expansion.",
        "trigger_threshold": 4,
    },
    {
        "id": "change-management",
        "title": "Change Management",
        "description": "Change readiness, implementation capability, and adoption.",
        "trigger_threshold": 4,
    },
]

QUESTION_TYPES = ["scale", "boolean", "text", "single-choice", "multi-choice"]

# Every scale question is 1-5 where a higher score signals a bigger problem.
DEFAULT_SCALE = {"min": 1, "max": 5}

SCALE_LABELS = [
    {"label": "1 • Strong", "value": 1},
    {"label": "2 • Good", "value": 2},
    {"label": "3 • Adequate", "value": 3},
    {"label": "4 • Weak", "value": 4},
    {"label": "5 • Critical", "value": 5},
]

# Base questions, in authored order per domain.
QUESTIONS = [
    # Strategic Alignment & Vision
    {"id": "1.1", "domain": "strategic-alignment", "type": "scale", "required": True,
     "text": "How unclear is your leadership team's shared articulation of the 3-year vision?"},
    {"id": "1.2", "domain": "strategic-alignment", "type": "scale", "required": True,
     "text": "How rarely do resource allocation decisions reference strategic priorities?"},
    {"id": "1.3", "domain": "strategic-alignment", "type": "scale", "required": True,
     "text": "How weakly do individual team goals connect to company-wide objectives?"},
    {"id": "1.4", "domain": "strategic-alignment", "type": "scale", "required": True,
     "text": "How inaccurate is leadership's assessment of your competitive position?"},
    {"id": "1.5", "domain": "strategic-alignment", "type": "scale", "required": True,
     "text": "How infrequently is strategy communicated to the organization?"},
    {"id": "1.6", "domain": "strategic-alignment", "type": "scale", "required": True,
     "text": "How slowly can the organization adapt strategy when markets shift?"},
    {"id": "1.7", "domain": "strategic-alignment", "type": "scale", "required": False,
     "text": "How poorly does strategic planning incorporate regulatory requirements?",
     "industry_specific": {"regulated": True}},
    # Financial Management
    {"id": "2.1", "domain": "financial-management", "type": "scale", "required": True,
     "text": "How unpredictable is monthly cash flow three months out?"},
    {"id": "2.2", "domain": "financial-management", "type": "scale", "required": True,
     "text": "How exposed is the business to a cash shortfall in the next two quarters?"},
    {"id": "2.3", "domain": "financial-management", "type": "scale", "required": True,
     "text": "How weak is visibility into margins by product, service or client?"},
    {"id": "2.4", "domain": "financial-management", "type": "scale", "required": True,
     "text": "How loosely are budgets tracked against actuals?"},
    {"id": "2.5", "domain": "financial-management", "type": "scale", "required": True,
     "text": "How slow is the monthly financial close?"},
    {"id": "2.6", "domain": "financial-management", "type": "scale", "required": True,
     "text": "How informal are approval controls over spending?"},
    {"id": "2.7", "domain": "financial-management", "type": "scale", "required": True,
     "text": "How limited is scenario planning for funding and runway?"},
    {"id": "2.8", "domain": "financial-management", "type": "boolean", "required": False,
     "text": "Do you have external financing in place for the next 12 months?"},
    {"id": "2.9", "domain": "financial-management", "type": "text", "required": False,
     "text": "Describe any pending financial events (raise, debt, acquisition)."},
    # Revenue Engine
    {"id": "3.1", "domain": "revenue-engine", "type": "scale", "required": True,
     "text": "How unpredictable is quarterly revenue?"},
    {"id": "3.2", "domain": "revenue-engine", "type": "scale", "required": True,
     "text": "How inconsistent is the sales process across the team?"},
    {"id": "3.3", "domain": "revenue-engine", "type": "scale", "required": True,
     "text": "How poorly is customer acquisition cost tracked and managed by channel?"},
    {"id": "3.4", "domain": "revenue-engine", "type": "scale", "required": True,
     "text": "How concentrated is revenue in a small number of streams or customers?"},
    {"id": "3.5", "domain": "revenue-engine", "type": "scale", "required": True,
     "text": "How unbalanced are supply and demand in your core market?"},
    {"id": "3.6", "domain": "revenue-engine", "type": "scale", "required": True,
     "text": "How unreliable is the sales pipeline as a forecasting tool?"},
    {"id": "3.7", "domain": "revenue-engine", "type": "scale", "required": True,
     "text": "How inconsistent is pricing discipline across deals?"},
    {"id": "3.8", "domain": "revenue-engine", "type": "multi-choice", "required": False,
     "text": "Which acquisition channels contribute material revenue?",
     "options": ["Direct sales", "Inbound marketing", "Partners", "Marketplaces", "Self-serve"]},
    {"id": "3.9", "domain": "revenue-engine", "type": "text", "required": False,
     "text": "Describe your largest revenue risk over the next year."},
    # Operational Excellence
    {"id": "4.1", "domain": "operational-excellence", "type": "scale", "required": True,
     "text": "How undocumented are your core operating processes?"},
    {"id": "4.2", "domain": "operational-excellence", "type": "scale", "required": True,
     "text": "How inefficient are day-to-day processes?"},
    {"id": "4.3", "domain": "operational-excellence", "type": "scale", "required": True,
     "text": "How inconsistent is output quality?"},
    {"id": "4.4", "domain": "operational-excellence", "type": "scale", "required": True,
     "text": "How poorly would current processes scale with 2x volume?"},
    {"id": "4.5", "domain": "operational-excellence", "type": "scale", "required": True,
     "text": "How rarely are operational KPIs reviewed?"},
    {"id": "4.6", "domain": "operational-excellence", "type": "scale", "required": True,
     "text": "How dependent are operations on a few key individuals?"},
    {"id": "4.7", "domain": "operational-excellence", "type": "scale", "required": True,
     "text": "How slowly are operational problems detected and fixed?"},
    {"id": "4.8", "domain": "operational-excellence", "type": "scale", "required": False,
     "text": "How unstandardized is delivery or production across teams and sites?"},
    # People & Organization
    {"id": "5.1", "domain": "people-organization", "type": "scale", "required": True,
     "text": "How hard is it to attract and retain quality talent?"},
    {"id": "5.2", "domain": "people-organization", "type": "scale", "required": True,
     "text": "How much is culture holding back morale and performance?"},
    {"id": "5.3", "domain": "people-organization", "type": "scale", "required": True,
     "text": "How thin is the leadership bench below the founders?"},
    {"id": "5.4", "domain": "people-organization", "type": "scale", "required": True,
     "text": "How poorly is team utilization managed?"},
    {"id": "5.5", "domain": "people-organization", "type": "scale", "required": True,
     "text": "How unclear are roles and responsibilities?"},
    {"id": "5.6", "domain": "people-organization", "type": "scale", "required": True,
     "text": "How ad hoc is performance management?"},
    {"id": "5.7", "domain": "people-organization", "type": "scale", "required": True,
     "text": "How limited is investment in learning and development?"},
    {"id": "5.8", "domain": "people-organization", "type": "boolean", "required": False,
     "text": "Do you run a regular employee engagement survey?"},
    {"id": "5.9", "domain": "people-organization", "type": "text", "required": False,
     "text": "Which roles are hardest to hire for today?"},
    # Technology & Data
    {"id": "6.1", "domain": "technology-data", "type": "scale", "required": True,
     "text": "How poorly would your technology scale with significant growth?"},
    {"id": "6.2", "domain": "technology-data", "type": "scale", "required": True,
     "text": "How unreliable or inaccessible is business data?"},
    {"id": "6.3", "domain": "technology-data", "type": "scale", "required": True,
     "text": "How heavy is accumulated technical debt?"},
    {"id": "6.4", "domain": "technology-data", "type": "scale", "required": True,
     "text": "How weak are security practices and access controls?"},
    {"id": "6.5", "domain": "technology-data", "type": "scale", "required": True,
     "text": "How fragmented are core systems and integrations?"},
    {"id": "6.6", "domain": "technology-data", "type": "scale", "required": True,
     "text": "How manual are reporting and analytics?"},
    {"id": "6.7", "domain": "technology-data", "type": "scale", "required": True,
     "text": "How slow is the release cycle for product or internal tools?"},
    {"id": "6.8", "domain": "technology-data", "type": "scale", "required": False,
     "text": "How far is the product architecture from supporting multi-tenant scale?"},
    # Customer Experience
    {"id": "7.1", "domain": "customer-experience", "type": "scale", "required": True,
     "text": "How far below industry norms is customer satisfaction?"},
    {"id": "7.2", "domain": "customer-experience", "type": "scale", "required": True,
     "text": "How weak is product-market fit?"},
    {"id": "7.3", "domain": "customer-experience", "type": "scale", "required": True,
     "text": "How rarely is customer feedback gathered and acted on?"},
    {"id": "7.4", "domain": "customer-experience", "type": "scale", "required": True,
     "text": "How inconsistent is the experience across touchpoints?"},
    {"id": "7.5", "domain": "customer-experience", "type": "scale", "required": True,
     "text": "How slow is response and resolution for customer issues?"},
    {"id": "7.6", "domain": "customer-experience", "type": "scale", "required": True,
     "text": "How poorly are customer segments understood?"},
    {"id": "7.7", "domain": "customer-experience", "type": "scale", "required": True,
     "text": "How weak is brand differentiation in the eyes of customers?"},
    {"id": "7.8", "domain": "customer-experience", "type": "text", "required": False,
     "text": "What is the most common customer complaint today?"},
    # Supply Chain
    {"id": "8.1", "domain": "supply-chain", "type": "scale", "required": True,
     "text": "How unreliable are key suppliers on time and quality?"},
    {"id": "8.2", "domain": "supply-chain", "type": "scale", "required": True,
     "text": "How poorly is supplier quality managed?"},
    {"id": "8.3", "domain": "supply-chain", "type": "single-choice", "required": True,
     "text": "Which best describes your sourcing model for critical inputs?",
     "options": ["Multi-source", "Dual-source", "Single-source", "Not applicable"]},
    {"id": "8.4", "domain": "supply-chain", "type": "scale", "required": True,
     "text": "How poorly is inventory balanced against demand?"},
    {"id": "8.5", "domain": "supply-chain", "type": "scale", "required": False,
     "text": "How exposed is the supply chain to geopolitical or logistics shocks?"},
    {"id": "8.6", "domain": "supply-chain", "type": "text", "required": False,
     "text": "Describe your most recent supply disruption and its impact."},
    # Risk & Compliance
    {"id": "9.1", "domain": "risk-compliance", "type": "scale", "required": True,
     "text": "How unsystematic is risk identification and assessment?"},
    {"id": "9.2", "domain": "risk-compliance", "type": "scale", "required": True,
     "text": "How reactive is regulatory compliance management?"},
    {"id": "9.3", "domain": "risk-compliance", "type": "scale", "required": True,
     "text": "How untested is business continuity planning?"},
    {"id": "9.4", "domain": "risk-compliance", "type": "scale", "required": True,
     "text": "How weak is contract and legal risk management?"},
    {"id": "9.5", "domain": "risk-compliance", "type": "scale", "required": True,
     "text": "How limited is insurance coverage for key exposures?"},
    {"id": "9.6", "domain": "risk-compliance", "type": "scale", "required": True,
     "text": "How poorly is data protection governed?"},
    {"id": "9.7", "domain": "risk-compliance", "type": "scale", "required": False,
     "text": "How unprepared is the business for an external audit?",
     "industry_specific": {"regulated": True}},
    {"id": "9.8", "domain": "risk-compliance", "type": "multi-choice", "required": False,
     "text": "Which regulatory frameworks apply to your organization?",
     "options": ["GDPR", "SOX", "PCI DSS", "HIPAA", "FCA", "Other"]},
    # Partnerships
    {"id": "10.1", "domain": "partnerships", "type": "scale", "required": True,
     "text": "How little business value do current partnerships contribute?"},
    {"id": "10.2", "domain": "partnerships", "type": "scale", "required": True,
     "text": "How unclear is ownership of partner relationships?"},
    {"id": "10.3", "domain": "partnerships", "type": "scale", "required": True,
     "text": "How isolated is the business from its wider ecosystem?"},
    {"id": "10.4", "domain": "partnerships", "type": "scale", "required": True,
     "text": "How rarely is partner performance reviewed?"},
    {"id": "10.5", "domain": "partnerships", "type": "scale", "required": True,
     "text": "How dependent is the business on a single partner?"},
    {"id": "10.6", "domain": "partnerships", "type": "scale", "required": True,
     "text": "How slow is onboarding of new partners?"},
    {"id": "10.7", "domain": "partnerships", "type": "text", "required": False,
     "text": "Which partnership would most change your trajectory if it existed?"},
    # Customer Success
    {"id": "11.1", "domain": "customer-success", "type": "scale", "required": True,
     "text": "How unsystematic is customer lifecycle management?"},
    {"id": "11.2", "domain": "customer-success", "type": "scale", "required": True,
     "text": "How poor is customer health monitoring and retention?"},
    {"id": "11.3", "domain": "customer-success", "type": "scale", "required": True,
     "text": "How ad hoc is customer onboarding?"},
    {"id": "11.4", "domain": "customer-success", "type": "scale", "required": True,
     "text": "How weak is expansion and upsell motion?"},
    {"id": "11.5", "domain": "customer-success", "type": "scale", "required": True,
     "text": "How slow is escalation handling for at-risk accounts?"},
    {"id": "11.6", "domain": "customer-success", "type": "scale", "required": True,
     "text": "How disconnected is customer success from product and sales?"},
    {"id": "11.7", "domain": "customer-success", "type": "boolean", "required": False,
     "text": "Do you track churn prediction signals for every account?"},
    {"id": "11.8", "domain": "customer-success", "type": "boolean", "required": False,
     "text": "Do you measure time-to-value for newly onboarded customers?"},
    # Change Management
    {"id": "12.1", "domain": "change-management", "type": "scale", "required": True,
     "text": "How often do change initiatives struggle or fail?"},
    {"id": "12.2", "domain": "change-management", "type": "scale", "required": True,
     "text": "How wide is the gap between planning and execution?"},
    {"id": "12.3", "domain": "change-management", "type": "scale", "required": True,
     "text": "How resistant is the organization to new ways of working?"},
    {"id": "12.4", "domain": "change-management", "type": "scale", "required": True,
     "text": "How poorly are changes communicated before rollout?"},
    {"id": "12.5", "domain": "change-management", "type": "scale", "required": True,
     "text": "How rarely is adoption measured after a change?"},
    {"id": "12.6", "domain": "change-management", "type": "scale", "required": True,
     "text": "How thin is change leadership capacity?"},
    {"id": "12.7", "domain": "change-management", "type": "scale", "required": True,
     "text": "How often do competing initiatives overload teams?"},
    {"id": "12.8", "domain": "change-management", "type": "scale", "required": False,
     "text": "How poorly does the organization absorb the change rapid growth demands?"},
]

# Conditional follow-ups. A follow-up without `show_if` fires when its trigger's numeric answer
# reaches the owning domain's `trigger_threshold`; with `show_if` it fires on a matching answer.
FOLLOW_UPS = [
    {"id": "1.1-followup-1", "domain": "strategic-alignment", "type": "text", "depends_on": "1.1",
     "text": "What is driving the different interpretations of the vision?"},
    {"id": "2.1-followup-1", "domain": "financial-management", "type": "text", "depends_on": "2.1",
     "text": "What are the main sources of cash flow unpredictability?"},
    {"id": "3.1-followup-1", "domain": "revenue-engine", "type": "text", "depends_on": "3.1",
     "text": "Which factors make revenue hard to predict?"},
    {"id": "3.3-followup-1", "domain": "revenue-engine", "type": "multi-choice", "depends_on": "3.3",
     "text": "What limits your CAC tracking today?",
     "options": ["No channel attribution", "Missing cost data", "No owner", "Tooling gaps"]},
    {"id": "4.1-followup-1", "domain": "operational-excellence", "type": "text", "depends_on": "4.1",
     "text": "Which undocumented process carries the most risk?"},
    {"id": "4.4-followup-1", "domain": "operational-excellence", "type": "text", "depends_on": "4.4",
     "text": "Which process would break first under growth?"},
    {"id": "5.1-followup-1", "domain": "people-organization", "type": "multi-choice", "depends_on": "5.1",
     "text": "What is behind the talent challenges?",
     "options": ["Compensation", "Employer brand", "Location", "Management quality", "Career paths"]},
    {"id": "5.2-followup-1", "domain": "people-organization", "type": "text", "depends_on": "5.2",
     "text": "Which cultural issues most affect performance?"},
    {"id": "6.1-followup-1", "domain": "technology-data", "type": "text", "depends_on": "6.1",
     "text": "Which technology investments are required to support growth?"},
    {"id": "6.2-followup-1", "domain": "technology-data", "type": "text", "depends_on": "6.2",
     "text": "Where do data quality problems hurt decisions most?"},
    {"id": "7.1-followup-1", "domain": "customer-experience", "type": "text", "depends_on": "7.1",
     "text": "What are customers most dissatisfied with?"},
    {"id": "7.2-followup-1", "domain": "customer-experience", "type": "text", "depends_on": "7.2",
     "text": "What evidence points to weak product-market fit?"},
    {"id": "8.3-followup-1", "domain": "supply-chain", "type": "scale", "depends_on": "8.3",
     "show_if": ["Single-source"],
     "text": "How severe would the loss of your single critical supplier be?"},
    {"id": "9.1-followup-1", "domain": "risk-compliance", "type": "text", "depends_on": "9.1",
     "text": "Which risks are currently unmanaged?"},
    {"id": "9.2-followup-1", "domain": "risk-compliance", "type": "boolean", "depends_on": "9.2",
     "text": "Have you received a regulatory finding in the last 24 months?"},
    {"id": "9.2-followup-2", "domain": "risk-compliance", "type": "text", "depends_on": "9.2-followup-1",
     "show_if": ["true"],
     "text": "Summarize the finding and the remediation status."},
    {"id": "10.1-followup-1", "domain": "partnerships", "type": "text", "depends_on": "10.1",
     "text": "Which partnerships drain resources without returning value?"},
    {"id": "10.3-followup-1", "domain": "partnerships", "type": "text", "depends_on": "10.3",
     "text": "Which ecosystem opportunities are you missing?"},
    {"id": "11.1-followup-1", "domain": "customer-success", "type": "multi-choice", "depends_on": "11.1",
     "text": "Which lifecycle stages have the biggest gaps?",
     "options": ["Onboarding", "Adoption", "Renewal", "Expansion", "Advocacy"]},
    {"id": "11.2-followup-1", "domain": "customer-success", "type": "text", "depends_on": "11.2",
     "text": "What are the leading reasons customers churn?"},
    {"id": "12.1-followup-1", "domain": "change-management", "type": "text", "depends_on": "12.1",
     "text": "Why did the most recent change initiative struggle?"},
    {"id": "12.2-followup-1", "domain": "change-management", "type": "text", "depends_on": "12.2",
     "text": "Where does execution most often break down?"},
]

# Business-model rule profiles. `questions` lists the (domain, question id) pairs a
# cross-domain predicate reads, in the order the predicate expects them.
BUSINESS_MODELS = {
    "b2b-saas": {
        "required_domains": [
            "strategic-alignment", "financial-management", "revenue-engine",
            "technology-data", "customer-success", "people-organization",
        ],
        "optional_domains": [
            "operational-excellence", "partnerships", "risk-compliance", "change-management",
        ],
        "domain_weighting": {
            "strategic-alignment": 1.0, "financial-management": 1.1, "revenue-engine": 1.2,
            "operational-excellence": 0.9, "people-organization": 1.0, "technology-data": 1.3,
            "customer-experience": 1.1, "supply-chain": 0.5, "risk-compliance": 0.8,
            "partnerships": 1.0, "customer-success": 1.4, "change-management": 0.9,
        },
        "key_metrics": ["MRR", "ARR", "Churn Rate", "LTV", "CAC", "NPS"],
        "cross_domain": [
            {
                "name": "cac-ltv-consistency",
                "domains": ["revenue-engine", "customer-success"],
                "questions": [["revenue-engine", "3.3"], ["customer-success", "11.2"]],
                "rule": "LTV:CAC ratio should be > 3:1",
                "message": "Poor customer acquisition cost management combined with poor retention "
                           "indicates unsustainable unit economics",
                "impact_on_timeline": True,
            },
            {
                "name": "churn-product-fit",
                "domains": ["customer-success", "customer-experience"],
                "questions": [["customer-success", "11.2"], ["customer-experience", "7.2"]],
                "rule": "High churn correlates with poor product-market fit",
                "message": "High customer churn combined with weak product-market fit indicates "
                           "fundamental business model issues",
                "impact_on_timeline": True,
            },
            {
                "name": "scaling-technology",
                "domains": ["revenue-engine", "technology-data"],
                "questions": [["revenue-engine", "3.1"], ["technology-data", "6.1"]],
                "rule": "Revenue growth must be supported by scalable technology",
                "message": "High revenue growth expectations with poor technology scalability may "
                           "limit growth potential",
                "impact_on_timeline": False,
            },
        ],
        "business_logic": [
            {
                "name": "subscription-metrics",
                "domain": "customer-success",
                "question_ids": ["11.7", "11.8"],
                "rule": "SaaS businesses must track churn and onboarding metrics",
                "message": "SaaS businesses should track churn prediction and customer onboarding metrics",
            },
            {
                "name": "product-architecture",
                "domain": "technology-data",
                "question_ids": ["6.8"],
                "rule": "SaaS products require scalable architecture",
                "message": "SaaS products require scalable, maintainable architecture for "
                           "multi-tenant operations",
            },
        ],
    },
    "b2c-marketplace": {
        "required_domains": [
            "strategic-alignment", "financial-management", "revenue-engine",
            "technology-data", "customer-experience", "partnerships",
        ],
        "optional_domains": [
            "operational-excellence", "people-organization", "customer-success",
            "risk-compliance", "change-management",
        ],
        "domain_weighting": {
            "strategic-alignment": 1.0, "financial-management": 1.1, "revenue-engine": 1.3,
            "operational-excellence": 1.0, "people-organization": 0.9, "technology-data": 1.2,
            "customer-experience": 1.4, "supply-chain": 0.7, "risk-compliance": 0.9,
            "partnerships": 1.3, "customer-success": 1.0, "change-management": 0.8,
        },
        "key_metrics": ["GMV", "Take Rate", "User Acquisition", "Engagement", "Transaction Volume"],
        "cross_domain": [
            {
                "name": "network-effects",
                "domains": ["revenue-engine", "customer-experience", "partnerships"],
                "questions": [["revenue-engine", "3.1"], ["partnerships", "10.1"]],
                "rule": "Marketplace success depends on network effects",
                "message": "Marketplace growth requires effective partnership ecosystem for "
                           "network effects",
                "impact_on_timeline": True,
            },
            {
                "name": "platform-scalability",
                "domains": ["technology-data", "partnerships"],
                "questions": [["technology-data", "6.1"], ["partnerships", "10.3"]],
                "rule": "Platform must scale with ecosystem partners",
                "message": "Technology platform limits combined with weak ecosystem integration "
                           "will constrain marketplace growth",
                "impact_on_timeline": False,
            },
        ],
        "business_logic": [
            {
                "name": "marketplace-metrics",
                "domain": "revenue-engine",
                "question_ids": ["3.4", "3.5"],
                "rule": "Marketplaces must track supply/demand balance",
                "message": "Marketplace platforms require balanced supply and demand metrics",
            },
        ],
    },
    "manufacturing": {
        "required_domains": [
            "strategic-alignment", "financial-management", "operational-excellence",
            "supply-chain", "people-organization", "risk-compliance",
        ],
        "optional_domains": [
            "revenue-engine", "technology-data", "customer-experience", "partnerships",
            "customer-success", "change-management",
        ],
        "domain_weighting": {
            "strategic-alignment": 1.0, "financial-management": 1.2, "revenue-engine": 1.0,
            "operational-excellence": 1.4, "people-organization": 1.1, "technology-data": 0.9,
            "customer-experience": 1.0, "supply-chain": 1.5, "risk-compliance": 1.2,
            "partnerships": 1.1, "customer-success": 0.8, "change-management": 1.0,
        },
        "key_metrics": ["OEE", "Inventory Turnover", "Quality Metrics", "Lead Times", "Cost per Unit"],
        "cross_domain": [
            {
                "name": "supply-operations-alignment",
                "domains": ["supply-chain", "operational-excellence"],
                "questions": [["supply-chain", "8.1"], ["operational-excellence", "4.2"]],
                "rule": "Supply chain efficiency must align with operational processes",
                "message": "Supply chain reliability issues combined with process inefficiencies "
                           "create significant operational risks",
                "impact_on_timeline": True,
            },
            {
                "name": "quality-supply-chain",
                "domains": ["supply-chain", "operational-excellence"],
                "questions": [["supply-chain", "8.2"], ["operational-excellence", "4.3"]],
                "rule": "Supplier quality directly impacts operational quality",
                "message": "Weak supplier quality management is feeding through to inconsistent "
                           "product quality",
                "impact_on_timeline": False,
            },
        ],
        "business_logic": [
            {
                "name": "manufacturing-processes",
                "domain": "operational-excellence",
                "question_ids": ["4.8"],
                "rule": "Manufacturing requires systematic process management",
                "message": "Manufacturing operations require well-documented, standardized processes",
            },
        ],
    },
    "services": {
        "required_domains": [
            "strategic-alignment", "financial-management", "revenue-engine",
            "people-organization", "customer-experience", "operational-excellence",
        ],
        "optional_domains": [
            "technology-data", "partnerships", "customer-success", "risk-compliance",
            "change-management",
        ],
        "domain_weighting": {
            "strategic-alignment": 1.0, "financial-management": 1.1, "revenue-engine": 1.2,
            "operational-excellence": 1.2, "people-organization": 1.4, "technology-data": 0.8,
            "customer-experience": 1.3, "supply-chain": 0.5, "risk-compliance": 0.9,
            "partnerships": 1.1, "customer-success": 1.1, "change-management": 1.0,
        },
        "key_metrics": ["Utilization Rate", "Project Margins", "Client Satisfaction",
                        "Employee Productivity"],
        "cross_domain": [
            {
                "name": "people-service-delivery",
                "domains": ["people-organization", "customer-experience"],
                "questions": [["people-organization", "5.1"], ["customer-experience", "7.1"]],
                "rule": "Service quality depends on people capabilities",
                "message": "Service quality issues often stem from talent management and "
                           "organizational development challenges",
                "impact_on_timeline": True,
            },
            {
                "name": "utilization-profitability",
                "domains": ["people-organization", "financial-management"],
                "questions": [["people-organization", "5.4"], ["financial-management", "2.3"]],
                "rule": "People utilization affects profitability",
                "message": "Poor utilization management combined with weak margin visibility puts "
                           "service profitability at risk",
                "impact_on_timeline": False,
            },
        ],
        "business_logic": [
            {
                "name": "service-standardization",
                "domain": "operational-excellence",
                "question_ids": ["4.8"],
                "rule": "Service businesses need delivery standardization",
                "message": "Service businesses benefit from standardized delivery processes for "
                           "consistency and scalability",
            },
        ],
    },
    "hybrid": {
        "required_domains": [
            "strategic-alignment", "financial-management", "revenue-engine",
            "operational-excellence", "people-organization", "technology-data",
            "customer-experience",
        ],
        "optional_domains": [
            "supply-chain", "risk-compliance", "partnerships", "customer-success",
            "change-management",
        ],
        "domain_weighting": {
            "strategic-alignment": 1.2, "financial-management": 1.2, "revenue-engine": 1.2,
            "operational-excellence": 1.1, "people-organization": 1.1, "technology-data": 1.0,
            "customer-experience": 1.1, "supply-chain": 0.8, "risk-compliance": 1.0,
            "partnerships": 1.0, "customer-success": 1.0, "change-management": 1.1,
        },
        "key_metrics": ["Revenue Mix", "Cross-sell Ratio", "Customer Lifetime Value",
                        "Operational Efficiency"],
        "cross_domain": [
            {
                "name": "revenue-stream-balance",
                "domains": ["strategic-alignment", "revenue-engine"],
                "questions": [["strategic-alignment", "1.1"], ["revenue-engine", "3.4"]],
                "rule": "Hybrid models require balanced revenue stream strategy",
                "message": "Hybrid business models require clear strategic direction and balanced "
                           "revenue diversification",
                "impact_on_timeline": True,
            },
            {
                "name": "operational-complexity",
                "domains": ["operational-excellence", "change-management"],
                "questions": [["operational-excellence", "4.4"], ["change-management", "12.2"]],
                "rule": "Hybrid models increase operational complexity",
                "message": "Operations that will not scale combined with weak execution make "
                           "running multiple business models unsustainable",
                "impact_on_timeline": False,
            },
        ],
        "business_logic": [],
    },
}

# Gap remediation prompts, keyed by the rule type that produced the gap.
GAP_PROMPTS = {
    "required": [
        "Why haven't you completed the {title} assessment?",
        "Are there specific challenges preventing you from answering these questions?",
    ],
    "consistency": [
        "Your answers in {title} appear to conflict with answers in a related domain.",
        "Help us understand how both situations can be true at the same time.",
    ],
    "quality": [
        "Please review your answers in {title}.",
        "This information is important for an accurate analysis.",
    ],
    "completeness": [
        "{title} carries extra weight for your business model.",
        "Completing it will sharpen the recommendations you receive.",
    ],
    "optional": [
        "Confirm your business model so domain-specific checks can run.",
    ],
    "low-completeness": [
        "Only part of {title} has been answered so far.",
    ],
}
