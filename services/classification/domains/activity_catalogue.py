"""
Activity Template Catalogue
===========================

Pre-authored Art. 30 processing activities, each guarded by a condition
on the organization profile.

Version: 0.1.0
"""

from collections.abc import Callable

from services.classification.models.activity import ENTERPRISE_EMPLOYEES, OrganizationProfile
from services.classification.services.generator import ActivityTemplate, TemplateEntry


COMPLIANCE_EMPLOYEES = 50


def _always(_: OrganizationProfile) -> bool:
    return True


def _industry_matches(*keywords: str) -> Callable[[OrganizationProfile], bool]:
    def guard(org: OrganizationProfile) -> bool:
        industry = org.industry.lower()
        return any(keyword in industry for keyword in keywords)

    return guard


_is_software = _industry_matches("software", "it")
_is_consulting = _industry_matches("consulting", "beratung")


# =============================================================================
# Base Activities
# =============================================================================


def _employee_administration(org: OrganizationProfile) -> ActivityTemplate:
    legal_basis = "Art. 6(1)(b), (c) GDPR (contract, legal obligation), § 26 BDSG"
    data_categories: tuple[str, ...] = (
        "Master data",
        "Salary data",
        "Working time data",
        "Application documents",
        "Performance reviews",
        "Training records",
    )
    if org.has_special_categories:
        legal_basis += ", Art. 9(2)(b) GDPR (employment and social security law)"
        data_categories += ("Health data (sick notes)", "Religious affiliation (church tax)")

    return ActivityTemplate(
        name="Employee data administration",
        purpose="Personnel administration, payroll, social security, employment contracts",
        legal_basis=legal_basis,
        data_categories=data_categories,
        data_subject_categories=("Employees", "Applicants", "Interns", "Apprentices", "Freelancers"),
        recipients=(
            "Payroll accounting",
            "Social security institutions",
            "Tax office",
            "Employers' liability insurance",
        ),
        retention_period="10 years after end of employment (tax retention)",
        technical_measures=("AES-256 encryption", "Role-based access control", "Automated backups", "Audit logging"),
        organizational_measures=(
            "Data protection training",
            "Authorisation concept",
            "Incident response plan",
            "Clean desk policy",
        ),
        special_categories=org.has_special_categories,
        comments="Central HR processing under German employment law",
    )


WEBSITE_MARKETING = ActivityTemplate(
    name="Website operation and online marketing",
    purpose="Company presentation, lead generation, newsletter delivery, search engine optimisation",
    legal_basis="Art. 6(1)(a) GDPR (consent), Art. 6(1)(f) GDPR (legitimate interest)",
    data_categories=("IP address", "Browser data", "Email address", "Usage behaviour", "Contact form data"),
    data_subject_categories=("Website visitors", "Newsletter subscribers", "Prospects", "Contact requests"),
    recipients=("Hosting provider", "CDN provider", "Analytics provider", "Marketing tools", "Newsletter service"),
    retention_period="2 years for analytics, until withdrawal for newsletter, 6 months for log files",
    technical_measures=("Cookie banner with consent management", "IP anonymisation", "TLS encryption"),
    organizational_measures=("Privacy notice", "Cookie policy", "Consent management", "Processor agreements"),
    third_country_transfer=True,
    comments="Third-country transfer to analytics providers: check adequacy decision or SCCs",
)

IT_SECURITY = ActivityTemplate(
    name="IT security and system monitoring",
    purpose="System security, network monitoring, incident response, compliance monitoring",
    legal_basis="Art. 6(1)(f) GDPR (legitimate interest in IT security)",
    data_categories=("Log data", "IP addresses", "Access data", "System events", "Security incidents"),
    data_subject_categories=("Employees", "System users", "Administrators", "External service providers"),
    recipients=("IT service provider", "Security provider", "Hosting provider", "Monitoring services"),
    retention_period="1 year for standard logs, 3 years for security incidents, 6 months for performance data",
    technical_measures=("Log encryption", "SIEM system", "Intrusion detection system", "Access logging"),
    organizational_measures=("IT security policy", "Incident response procedure", "Log review process"),
    comments="Baseline IT security required for every organization",
)


# =============================================================================
# Industry Activities
# =============================================================================


def _customer_projects(org: OrganizationProfile) -> ActivityTemplate:
    return ActivityTemplate(
        name="Customer data and project management",
        purpose="Customer care, project delivery, contract management, support, invoicing",
        legal_basis="Art. 6(1)(b) GDPR (performance of contract), Art. 6(1)(f) GDPR (legitimate interest)",
        data_categories=(
            "Contact data",
            "Contract data",
            "Project data",
            "Communication data",
            "Payment data",
            "Support tickets",
            "Usage statistics",
        ),
        data_subject_categories=("Customers", "Contact persons", "End users", "Stakeholders"),
        recipients=("CRM system", "Project management tools", "Payment provider", "Collaboration tools", "Support system"),
        retention_period="10 years after contract end (tax retention), 3 years for support data",
        technical_measures=("End-to-end encryption", "Database encryption", "API security", "Multi-factor authentication"),
        organizational_measures=(
            "Customer data policy",
            "Project security guidelines",
            "NDA management",
            "Data retention policy",
        ),
        third_country_transfer=org.has_third_country_transfer,
    )


SOFTWARE_DEVELOPMENT = ActivityTemplate(
    name="Software development and code management",
    purpose="Software development, version control, code review, deployment, testing",
    legal_basis="Art. 6(1)(b) GDPR (employment contract), Art. 6(1)(f) GDPR (legitimate interest)",
    data_categories=("Developer profiles", "Code commits", "Review comments", "Build logs", "Issue tracker data"),
    data_subject_categories=("Developers", "Code reviewers", "DevOps teams", "External developers"),
    recipients=("Git hosting (GitHub/GitLab)", "CI/CD systems", "Code quality tools", "Issue tracker"),
    retention_period="7 years for code archives, 2 years for development metrics",
    technical_measures=("Repository encryption", "Access controls", "Branch protection", "Secret scanning"),
    organizational_measures=("Secure development lifecycle", "Code review guidelines", "Access review"),
    third_country_transfer=True,
    comments="Git hosting in the USA: verify standard contractual clauses (SCC)",
)

CONSULTING = ActivityTemplate(
    name="Consulting services and knowledge management",
    purpose="Client consulting, knowledge building, consulting reports, expertise development",
    legal_basis="Art. 6(1)(b) GDPR (performance of contract), Art. 6(1)(f) GDPR (legitimate interest)",
    data_categories=("Consulting documents", "Analysis results", "Expertise profiles", "Meeting notes"),
    data_subject_categories=("Consulting clients", "Consultants", "Subject matter experts", "Stakeholders"),
    recipients=("Knowledge management systems", "Document management", "Collaboration tools"),
    retention_period="10 years for consulting documentation, 5 years for knowledge articles",
    technical_measures=("Document encryption", "Access controls", "Version control"),
    organizational_measures=("Consulting guidelines", "Confidentiality agreements", "Knowledge retention policy"),
)


# =============================================================================
# Size Activities
# =============================================================================

COMPLIANCE_AUDIT = ActivityTemplate(
    name="Compliance and audit management",
    purpose="GDPR compliance, internal audits, authority communication, compliance reporting",
    legal_basis="Art. 6(1)(c) GDPR (legal obligation), Art. 6(1)(f) GDPR (legitimate interest)",
    data_categories=("Audit logs", "Compliance reports", "Data breaches", "Training records"),
    data_subject_categories=("Employees", "Customers", "Data subjects", "Auditors"),
    recipients=("Supervisory authorities", "External auditors", "Lawyers", "Management"),
    retention_period="3 years for audit logs, 10 years for compliance evidence, 7 years for training records",
    technical_measures=("Tamper-proof logging", "Audit trail system", "Compliance dashboard"),
    organizational_measures=("Compliance framework", "Audit procedures", "Training programme"),
    comments="From 20 employees a data protection officer must be appointed",
)

ERP = ActivityTemplate(
    name="Enterprise resource planning (ERP)",
    purpose="Business planning, resource management, financial controlling, reporting",
    legal_basis="Art. 6(1)(f) GDPR (legitimate interest)",
    data_categories=("Financial data", "Planning data", "Performance KPIs", "Controlling data"),
    data_subject_categories=("Employees", "Customers", "Suppliers", "Stakeholders"),
    recipients=("ERP system", "BI tools", "Controlling software", "Management dashboards"),
    retention_period="10 years for financial data, 7 years for planning data",
    technical_measures=("ERP security", "Data warehouse security", "BI access controls"),
    organizational_measures=("ERP governance", "Data quality management", "Financial controls"),
)


# =============================================================================
# Technology And Compliance Activities
# =============================================================================


def _ai_processing(org: OrganizationProfile) -> ActivityTemplate:
    return ActivityTemplate(
        name="AI-based data processing and machine learning",
        purpose="Data analysis, predictive analytics, process optimisation, automation, customer service AI",
        legal_basis="Art. 6(1)(a) GDPR (consent), Art. 6(1)(f) GDPR (legitimate interest)",
        data_categories=("Usage data", "Behavioural data", "Preference data", "Interaction data", "Training data"),
        data_subject_categories=("Customers", "Users", "Prospects", "Website visitors"),
        recipients=("Local AI systems", "ML pipeline", "Analytics platform", "Data science team"),
        retention_period="2 years for training data, 6 months for inference logs, 1 year for analytics",
        technical_measures=(
            "Local AI processing (privacy by design)",
            "Data minimisation",
            "Pseudonymisation",
            "Differential privacy",
        ),
        organizational_measures=(
            "AI ethics guidelines",
            "Algorithmic bias monitoring",
            "Human-in-the-loop oversight",
            "AI impact assessment",
        ),
        involves_ai=True,
        automated_decisions=org.has_automated_decision_making,
        systematic_monitoring=org.has_systematic_monitoring,
        comments="EU AI Act compliance required: carry out a risk classification",
    )


CLOUD_SERVICES = ActivityTemplate(
    name="Cloud services and international data transfers",
    purpose="Cloud computing, global collaboration, international project delivery",
    legal_basis="Art. 6(1)(b) GDPR (performance of contract), Art. 6(1)(f) GDPR (legitimate interest)",
    data_categories=("Project documents", "Collaboration data", "Cloud storage content", "Communication data"),
    data_subject_categories=("Employees", "Customers", "Partners", "Project participants"),
    recipients=("US cloud providers", "International collaboration tools", "Global teams"),
    retention_period="Project duration plus 3 years, at most 7 years",
    technical_measures=("Standard contractual clauses (SCC)", "Supplementary safeguards", "Encryption at rest"),
    organizational_measures=("Transfer impact assessment (TIA)", "Regular SCC reviews", "Vendor management"),
    third_country_transfer=True,
    comments="No adequacy for unrestricted US transfers: SCCs and supplementary safeguards required",
)

DATA_PROTECTION_OFFICER = ActivityTemplate(
    name="Data protection officer activities",
    purpose="Data protection advice, compliance monitoring, authority contact, training",
    legal_basis="Art. 6(1)(c) GDPR (legal obligation)",
    data_categories=("Data protection requests", "Compliance status", "Training material", "Incident reports"),
    data_subject_categories=("All data subjects", "Employees", "Management"),
    recipients=("Supervisory authorities", "Management", "Employees", "External advisors"),
    retention_period="3 years for advisory documentation, indefinitely for legal opinions",
    technical_measures=("Secure communication channels", "Encrypted documentation"),
    organizational_measures=("DPO mandate", "Independence guarantees", "Freedom from instructions"),
    comments="Mandatory for more than 20 employees with data processing as a core activity",
)

WORKS_COUNCIL = ActivityTemplate(
    name="Works council and co-determination",
    purpose="Co-determination in personnel measures, works council work, employee representation",
    legal_basis="§ 26 BDSG, BetrVG, Art. 6(1)(c) GDPR (legal obligation)",
    data_categories=("Personnel measure data", "Works council minutes", "Co-determination procedures"),
    data_subject_categories=("Employees", "Works council members", "Union members"),
    recipients=("Works council", "Trade unions", "Labour court", "Personnel administration"),
    retention_period="4 years for works council records, 30 years for personnel files",
    technical_measures=("Separate data processing", "Access restriction", "Encryption"),
    organizational_measures=("Works agreements", "Co-determination procedures", "Confidentiality rules"),
    comments="Special rights under BetrVG: separate data processing required",
)


def _fixed(template: ActivityTemplate) -> Callable[[OrganizationProfile], ActivityTemplate]:
    return lambda _: template


CATALOGUE: tuple[TemplateEntry[OrganizationProfile], ...] = (
    TemplateEntry(_always, _employee_administration),
    TemplateEntry(_always, _fixed(WEBSITE_MARKETING)),
    TemplateEntry(_always, _fixed(IT_SECURITY)),
    TemplateEntry(lambda org: _is_software(org) and org.has_customer_data, _customer_projects),
    TemplateEntry(_is_software, _fixed(SOFTWARE_DEVELOPMENT)),
    TemplateEntry(_is_consulting, _fixed(CONSULTING)),
    TemplateEntry(lambda org: org.employee_count >= COMPLIANCE_EMPLOYEES, _fixed(COMPLIANCE_AUDIT)),
    TemplateEntry(lambda org: org.employee_count >= ENTERPRISE_EMPLOYEES, _fixed(ERP)),
    TemplateEntry(lambda org: org.uses_ai_processing, _ai_processing),
    TemplateEntry(lambda org: org.has_third_country_transfer, _fixed(CLOUD_SERVICES)),
    TemplateEntry(lambda org: org.has_data_protection_officer, _fixed(DATA_PROTECTION_OFFICER)),
    TemplateEntry(lambda org: org.has_works_council, _fixed(WORKS_COUNCIL)),
)
