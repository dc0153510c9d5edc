"""Static reference data for market-rate estimates (Australian market, 2025-26).

Table order matters: the role matcher breaks score ties by first-seen key.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Dict, Mapping, Tuple

from coach_advisor.core.models import CompensationBand, MarginBenchmark


def _bands(rows: Dict[str, Tuple[int, int, int]]) -> Mapping[str, CompensationBand]:
    return MappingProxyType(
        {key: CompensationBand(min=lo, max=hi, typical=typ) for key, (lo, hi, typ) in rows.items()}
    )


# (min, max, typical) annual salary in AUD
SALARY_GUIDES: Mapping[str, CompensationBand] = _bands(
    {
        # Admin & Office
        "admin": (52000, 68000, 58000),
        "administrator": (52000, 68000, 58000),
        "receptionist": (50000, 62000, 55000),
        "office_manager": (68000, 95000, 78000),
        "executive_assistant": (65000, 95000, 78000),
        "personal_assistant": (60000, 85000, 70000),
        "customer_service": (50000, 70000, 58000),
        "customer_support": (50000, 70000, 58000),
        # Finance & Accounting
        "bookkeeper": (58000, 78000, 68000),
        "accountant": (72000, 115000, 88000),
        "senior_accountant": (90000, 130000, 105000),
        "financial_controller": (120000, 180000, 145000),
        "cfo": (150000, 280000, 200000),
        "finance_manager": (100000, 150000, 120000),
        "payroll": (55000, 80000, 65000),
        # Sales
        "sales": (55000, 90000, 70000),
        "sales_rep": (62000, 105000, 78000),
        "sales_representative": (62000, 105000, 78000),
        "sales_manager": (95000, 145000, 115000),
        "business_development": (75000, 130000, 95000),
        "account_manager": (70000, 120000, 90000),
        "sales_director": (130000, 200000, 160000),
        # Marketing
        "marketing": (55000, 85000, 68000),
        "marketing_coordinator": (58000, 78000, 68000),
        "marketing_manager": (85000, 135000, 105000),
        "digital_marketing": (60000, 95000, 75000),
        "content_creator": (55000, 85000, 68000),
        "social_media": (52000, 80000, 62000),
        "marketing_director": (130000, 200000, 155000),
        # Management
        "manager": (80000, 130000, 100000),
        "senior_manager": (110000, 160000, 130000),
        "project_manager": (88000, 135000, 108000),
        "operations_manager": (95000, 145000, 115000),
        "general_manager": (125000, 210000, 155000),
        "ceo": (150000, 350000, 220000),
        "director": (130000, 220000, 165000),
        "team_leader": (70000, 100000, 82000),
        "supervisor": (65000, 95000, 78000),
        "coordinator": (55000, 80000, 65000),
        # HR
        "hr": (60000, 90000, 72000),
        "hr_manager": (90000, 140000, 110000),
        "hr_coordinator": (58000, 78000, 66000),
        "recruiter": (60000, 100000, 75000),
        "people_culture": (65000, 95000, 78000),
        # Trades & Construction
        "tradesperson": (68000, 100000, 82000),
        "electrician": (70000, 110000, 85000),
        "plumber": (70000, 110000, 85000),
        "carpenter": (65000, 100000, 80000),
        "builder": (75000, 120000, 90000),
        "foreman": (85000, 130000, 100000),
        "site_manager": (95000, 145000, 115000),
        "apprentice": (38000, 58000, 48000),
        "labourer": (52000, 72000, 62000),
        "technician": (62000, 95000, 78000),
        "mechanic": (60000, 95000, 75000),
        # Warehouse & Logistics
        "warehouse": (50000, 70000, 58000),
        "warehouse_manager": (70000, 100000, 82000),
        "driver": (55000, 80000, 65000),
        "delivery_driver": (52000, 72000, 60000),
        "truck_driver": (60000, 90000, 72000),
        "logistics": (55000, 85000, 68000),
        "logistics_manager": (80000, 120000, 95000),
        "supply_chain": (70000, 110000, 85000),
        # Tech & IT
        "developer": (85000, 160000, 115000),
        "software_developer": (85000, 160000, 115000),
        "senior_developer": (120000, 200000, 150000),
        "engineer": (80000, 150000, 110000),
        "software_engineer": (90000, 170000, 125000),
        "it_support": (55000, 85000, 68000),
        "it_manager": (100000, 160000, 125000),
        "data_analyst": (70000, 110000, 85000),
        "analyst": (65000, 100000, 80000),
        "designer": (62000, 105000, 78000),
        "graphic_designer": (58000, 90000, 72000),
        "ux_designer": (80000, 140000, 105000),
        "web_developer": (70000, 130000, 95000),
        # Professional Services
        "consultant": (95000, 160000, 120000),
        "senior_consultant": (120000, 200000, 150000),
        "lawyer": (80000, 200000, 120000),
        "solicitor": (75000, 180000, 110000),
        "paralegal": (55000, 80000, 65000),
        # Healthcare
        "nurse": (70000, 100000, 82000),
        "registered_nurse": (72000, 105000, 85000),
        "practice_manager": (75000, 110000, 90000),
        "dental_assistant": (50000, 70000, 58000),
        "physiotherapist": (70000, 110000, 85000),
        # Hospitality & Retail
        "chef": (55000, 90000, 68000),
        "head_chef": (70000, 110000, 85000),
        "kitchen_hand": (48000, 60000, 52000),
        "barista": (48000, 60000, 52000),
        "retail": (48000, 62000, 54000),
        "retail_manager": (60000, 85000, 70000),
        "store_manager": (62000, 90000, 72000),
        # Other
        "cleaner": (48000, 62000, 54000),
        "security": (52000, 72000, 60000),
        "trainer": (60000, 95000, 75000),
    }
)

# (min, max, typical) one-off project cost in AUD
PROJECT_COST_GUIDES: Mapping[str, CompensationBand] = _bands(
    {
        "website_redesign": (5000, 50000, 15000),
        "website_basic": (2000, 10000, 5000),
        "ecommerce_site": (10000, 80000, 30000),
        "crm_implementation": (5000, 50000, 20000),
        "erp_system": (20000, 200000, 75000),
        "marketing_campaign": (5000, 50000, 15000),
        "brand_refresh": (5000, 40000, 15000),
        "full_rebrand": (15000, 100000, 40000),
        "staff_training": (2000, 20000, 8000),
        "leadership_program": (10000, 50000, 25000),
        "office_fitout": (10000, 150000, 50000),
        "equipment_upgrade": (5000, 100000, 25000),
        "vehicle": (30000, 80000, 50000),
        "software_subscription": (2000, 20000, 8000),
        "consulting": (5000, 50000, 20000),
        "coaching": (10000, 40000, 24000),
    }
)

MARGIN_GUIDES: Mapping[str, MarginBenchmark] = MappingProxyType(
    {
        "trades": MarginBenchmark(gross_margin=45, net_margin=12),
        "professional_services": MarginBenchmark(gross_margin=60, net_margin=20),
        "retail": MarginBenchmark(gross_margin=40, net_margin=8),
        "hospitality": MarginBenchmark(gross_margin=65, net_margin=10),
        "manufacturing": MarginBenchmark(gross_margin=35, net_margin=10),
        "construction": MarginBenchmark(gross_margin=25, net_margin=8),
        "healthcare": MarginBenchmark(gross_margin=55, net_margin=15),
        "technology": MarginBenchmark(gross_margin=70, net_margin=20),
        "other": MarginBenchmark(gross_margin=45, net_margin=12),
    }
)
DEFAULT_INDUSTRY = "other"

ROLE_ALIASES: Mapping[str, str] = MappingProxyType(
    {
        "administrative_assistant": "admin",
        "office_administrator": "admin",
        "pa": "personal_assistant",
        "book_keeper": "bookkeeper",
        "bk": "bookkeeper",
        "pm": "project_manager",
        "ops_manager": "operations_manager",
        "gm": "general_manager",
        "tradie": "tradesperson",
        "trade": "tradesperson",
        "dev": "developer",
        "programmer": "developer",
        "coder": "developer",
        "bdm": "business_development",
        "biz_dev": "business_development",
        "csr": "customer_service",
        "cust_service": "customer_service",
        "ea": "executive_assistant",
        "it": "it_support",
        "marketing_exec": "marketing",
        "hr_officer": "hr",
        "human_resources": "hr",
        "finance": "accountant",
        "accounts": "accountant",
    }
)

# keyed on the space-separated normalized phrase
PROJECT_TYPE_ALIASES: Mapping[str, str] = MappingProxyType(
    {
        "website": "website_redesign",
        "web design": "website_redesign",
        "new website": "website_redesign",
        "crm": "crm_implementation",
        "customer relationship": "crm_implementation",
        "marketing": "marketing_campaign",
        "advertising": "marketing_campaign",
        "brand": "brand_refresh",
        "branding": "brand_refresh",
        "logo": "brand_refresh",
        "training": "staff_training",
        "team training": "staff_training",
        "office": "office_fitout",
        "fit out": "office_fitout",
        "renovation": "office_fitout",
        "equipment": "equipment_upgrade",
        "tools": "equipment_upgrade",
        "machinery": "equipment_upgrade",
        "car": "vehicle",
        "truck": "vehicle",
        "van": "vehicle",
        "ute": "vehicle",
        "software": "software_subscription",
        "saas": "software_subscription",
        "consultant": "consulting",
        "advisor": "consulting",
        "coach": "coaching",
        "business coach": "coaching",
    }
)
