"""Default configuration used for seeding and templates."""

from typing import Any, Dict, List

DEFAULT_SCORE_RANGES: List[Dict[str, Any]] = [
    {
        "name": "Excellent",
        "description": "Exceptional credit profile with minimal risk",
        "min_score": 750,
        "max_score": 850,
        "color": "#10B981",
        "approval_status": "Approved",
        "risk_level": "Low Risk",
        "interest_rate_adjustment": -0.5,
        "loan_limit_adjustment": 1.2,
        "priority": 1,
    },
    {
        "name": "Good",
        "description": "Strong credit profile with low risk",
        "min_score": 700,
        "max_score": 749,
        "color": "#3B82F6",
        "approval_status": "Approved",
        "risk_level": "Low Risk",
        "interest_rate_adjustment": -0.25,
        "loan_limit_adjustment": 1.1,
        "priority": 2,
    },
    {
        "name": "Fair",
        "description": "Acceptable credit profile with moderate risk",
        "min_score": 650,
        "max_score": 699,
        "color": "#F59E0B",
        "approval_status": "Approved with Conditions",
        "risk_level": "Medium Risk",
        "interest_rate_adjustment": 0.5,
        "loan_limit_adjustment": 0.9,
        "priority": 3,
    },
    {
        "name": "Poor",
        "description": "Weak credit profile with high risk",
        "min_score": 600,
        "max_score": 649,
        "color": "#EF4444",
        "approval_status": "Rejected",
        "risk_level": "High Risk",
        "interest_rate_adjustment": 2.0,
        "loan_limit_adjustment": 0.7,
        "priority": 4,
    },
    {
        "name": "Very Poor",
        "description": "Very weak credit profile with very high risk",
        "min_score": 300,
        "max_score": 599,
        "color": "#991B1B",
        "approval_status": "Rejected",
        "risk_level": "Very High Risk",
        "interest_rate_adjustment": 3.0,
        "loan_limit_adjustment": 0.5,
        "priority": 5,
    },
]


DEFAULT_SCORING_CONFIGS: List[Dict[str, Any]] = [
    {
        "factor": "age",
        "name": "Age Factor",
        "description": "Points awarded by age band",
        "category": "demographic",
        "max_points": 50,
        "weight": 1.0,
        "calculation_type": "threshold",
        "thresholds": {
            "optimal": {"min": 25, "max": 55, "points": 50},
            "good": {"min": 22, "max": 65, "points": 40},
            "acceptable": {"min": 18, "max": 70, "points": 25},
        },
    },
    {
        "factor": "annualIncome",
        "name": "Annual Income",
        "description": "Two points per thousand of income, capped at 100,000",
        "category": "financial",
        "max_points": 200,
        "weight": 1.0,
        "calculation_type": "linear",
        "thresholds": {"multiplier": 2, "cap": 100000, "scale": 1000},
    },
    {
        "factor": "debtToIncomeRatio",
        "name": "Debt-to-Income Ratio",
        "description": "Lower ratios score higher",
        "category": "financial",
        "max_points": 80,
        "weight": 1.0,
        "calculation_type": "threshold",
        "thresholds": {
            "excellent": {"max": 0.3, "points": 80},
            "good": {"max": 0.5, "points": 50},
            "fair": {"max": 0.7, "points": 20},
        },
    },
    {
        "factor": "creditHistoryLength",
        "name": "Credit History Length",
        "description": "Eight points per year of history, capped at ten years",
        "category": "credit",
        "max_points": 80,
        "weight": 1.0,
        "calculation_type": "linear",
        "thresholds": {"multiplier": 8, "cap": 10},
    },
    {
        "factor": "creditUtilization",
        "name": "Credit Utilization",
        "description": "Lower utilization scores higher",
        "category": "credit",
        "max_points": 60,
        "weight": 1.0,
        "calculation_type": "threshold",
        "thresholds": {
            "excellent": {"max": 0.3, "points": 60},
            "good": {"max": 0.5, "points": 40},
            "fair": {"max": 0.7, "points": 20},
        },
    },
    {
        "factor": "employmentStatus",
        "name": "Employment Status",
        "description": "Points by employment category",
        "category": "employment",
        "max_points": 60,
        "weight": 1.0,
        "calculation_type": "categorical",
        "thresholds": {
            "Employed": 60,
            "Self-Employed": 50,
            "Retired": 55,
            "Unemployed": 0,
        },
    },
    {
        "factor": "educationLevel",
        "name": "Education Level",
        "description": "Points by highest completed education",
        "category": "demographic",
        "max_points": 40,
        "weight": 1.0,
        "calculation_type": "categorical",
        "thresholds": {
            "PhD": 40,
            "Master": 35,
            "Bachelor": 30,
            "Associate": 25,
            "High School": 15,
        },
    },
    {
        "factor": "latePayments12m",
        "name": "Late Payments (12 months)",
        "description": "Penalty per late payment in the last year",
        "category": "credit",
        "max_points": -15,
        "weight": 1.0,
        "calculation_type": "linear",
        "thresholds": {"penalty": -15},
    },
    {
        "factor": "recentInquiries",
        "name": "Recent Credit Inquiries",
        "description": "Penalty per recent hard inquiry",
        "category": "credit",
        "max_points": -10,
        "weight": 1.0,
        "calculation_type": "linear",
        "thresholds": {"penalty": -10},
    },
]


SCORING_TEMPLATES: Dict[str, Dict[str, Any]] = {
    "conservative": {
        "name": "Conservative Scoring",
        "description": "Strict scoring with higher penalties for risk factors",
        "configs": [
            {
                "factor": "age",
                "name": "Age Factor",
                "description": "Conservative age scoring",
                "category": "demographic",
                "max_points": 40,
                "weight": 1.2,
                "calculation_type": "threshold",
                "thresholds": {
                    "optimal": {"min": 30, "max": 50, "points": 40},
                    "good": {"min": 25, "max": 60, "points": 30},
                    "acceptable": {"min": 20, "max": 65, "points": 15},
                },
            },
            {
                "factor": "annualIncome",
                "name": "Annual Income",
                "description": "Conservative income requirements",
                "category": "financial",
                "max_points": 150,
                "weight": 1.3,
                "calculation_type": "linear",
                "thresholds": {"multiplier": 1.5, "cap": 80000, "scale": 1000},
            },
            {
                "factor": "debtToIncomeRatio",
                "name": "Debt-to-Income Ratio",
                "description": "Strict debt ratio limits",
                "category": "financial",
                "max_points": 100,
                "weight": 1.5,
                "calculation_type": "threshold",
                "thresholds": {
                    "excellent": {"max": 0.25, "points": 100},
                    "good": {"max": 0.4, "points": 60},
                    "fair": {"max": 0.5, "points": 20},
                },
            },
        ],
    },
    "balanced": {
        "name": "Balanced Scoring",
        "description": "Moderate scoring with balanced risk and reward",
        "configs": [
            {
                "factor": "age",
                "name": "Age Factor",
                "description": "Balanced age scoring",
                "category": "demographic",
                "max_points": 50,
                "weight": 1.0,
                "calculation_type": "threshold",
                "thresholds": {
                    "optimal": {"min": 25, "max": 55, "points": 50},
                    "good": {"min": 22, "max": 65, "points": 40},
                    "acceptable": {"min": 18, "max": 70, "points": 25},
                },
            },
            {
                "factor": "annualIncome",
                "name": "Annual Income",
                "description": "Balanced income scoring",
                "category": "financial",
                "max_points": 200,
                "weight": 1.0,
                "calculation_type": "linear",
                "thresholds": {"multiplier": 2.0, "cap": 100000, "scale": 1000},
            },
            {
                "factor": "debtToIncomeRatio",
                "name": "Debt-to-Income Ratio",
                "description": "Balanced debt ratio limits",
                "category": "financial",
                "max_points": 80,
                "weight": 1.0,
                "calculation_type": "threshold",
                "thresholds": {
                    "excellent": {"max": 0.3, "points": 80},
                    "good": {"max": 0.5, "points": 50},
                    "fair": {"max": 0.7, "points": 20},
                },
            },
        ],
    },
    "aggressive": {
        "name": "Aggressive Scoring",
        "description": "Lenient scoring with higher rewards for positive factors",
        "configs": [
            {
                "factor": "age",
                "name": "Age Factor",
                "description": "Aggressive age scoring",
                "category": "demographic",
                "max_points": 60,
                "weight": 0.8,
                "calculation_type": "threshold",
                "thresholds": {
                    "optimal": {"min": 20, "max": 60, "points": 60},
                    "good": {"min": 18, "max": 70, "points": 50},
                    "acceptable": {"min": 16, "max": 75, "points": 30},
                },
            },
            {
                "factor": "annualIncome",
                "name": "Annual Income",
                "description": "Aggressive income scoring",
                "category": "financial",
                "max_points": 250,
                "weight": 0.7,
                "calculation_type": "linear",
                "thresholds": {"multiplier": 2.5, "cap": 120000, "scale": 1000},
            },
            {
                "factor": "debtToIncomeRatio",
                "name": "Debt-to-Income Ratio",
                "description": "Lenient debt ratio limits",
                "category": "financial",
                "max_points": 60,
                "weight": 0.8,
                "calculation_type": "threshold",
                "thresholds": {
                    "excellent": {"max": 0.4, "points": 60},
                    "good": {"max": 0.6, "points": 40},
                    "fair": {"max": 0.8, "points": 20},
                },
            },
        ],
    },
}


DEFAULT_APPLICANT_FIELDS: List[Dict[str, Any]] = [
    # Personal
    {
        "field_name": "age",
        "display_name": "Age",
        "description": "Applicant age in years",
        "field_type": "number",
        "category": "personal",
        "is_required": True,
        "validation_rules": {"min": 18, "max": 100},
        "placeholder": "e.g., 35",
        "help_text": "Must be between 18 and 100 years old",
        "display_order": 1,
        "scoring_weight": 1.0,
    },
    {
        "field_name": "educationLevel",
        "display_name": "Education Level",
        "description": "Highest education level completed",
        "field_type": "select",
        "category": "personal",
        "is_required": True,
        "options": ["High School", "Associate", "Bachelor", "Master", "PhD"],
        "placeholder": "Select education level",
        "help_text": "Select your highest education level",
        "display_order": 2,
        "scoring_weight": 0.8,
    },
    # Financial
    {
        "field_name": "annualIncome",
        "display_name": "Annual Income",
        "description": "Gross annual income before taxes",
        "field_type": "number",
        "category": "financial",
        "is_required": True,
        "validation_rules": {"min": 0},
        "placeholder": "e.g., 75000",
        "help_text": "Enter your total annual income before taxes",
        "display_order": 3,
        "scoring_weight": 1.5,
    },
    {
        "field_name": "debtToIncomeRatio",
        "display_name": "Debt-to-Income Ratio",
        "description": "Monthly debt payments divided by monthly income",
        "field_type": "number",
        "category": "financial",
        "is_required": True,
        "validation_rules": {"min": 0, "max": 1},
        "placeholder": "e.g., 0.35",
        "help_text": "Total monthly debt payments / monthly gross income",
        "display_order": 4,
        "scoring_weight": 1.2,
    },
    # Employment
    {
        "field_name": "employmentStatus",
        "display_name": "Employment Status",
        "description": "Current employment status",
        "field_type": "select",
        "category": "employment",
        "is_required": True,
        "options": ["Employed", "Self-Employed", "Retired", "Unemployed"],
        "placeholder": "Select employment status",
        "help_text": "Select your current employment status",
        "display_order": 5,
        "scoring_weight": 1.0,
    },
    {
        "field_name": "creditHistoryLength",
        "display_name": "Credit History Length",
        "description": "Number of years with credit history",
        "field_type": "number",
        "category": "employment",
        "is_required": True,
        "validation_rules": {"min": 0, "max": 50},
        "placeholder": "e.g., 8",
        "help_text": "How many years you have had credit",
        "display_order": 6,
        "scoring_weight": 1.1,
    },
    # Credit
    {
        "field_name": "creditUtilization",
        "display_name": "Credit Utilization",
        "description": "Credit card balances divided by credit limits",
        "field_type": "number",
        "category": "credit",
        "is_required": True,
        "validation_rules": {"min": 0, "max": 1},
        "placeholder": "e.g., 0.25",
        "help_text": "Total credit card balances / total credit limits",
        "display_order": 7,
        "scoring_weight": 1.3,
    },
    {
        "field_name": "latePayments12m",
        "display_name": "Late Payments (12m)",
        "description": "Number of late payments in past 12 months",
        "field_type": "number",
        "category": "credit",
        "is_required": True,
        "validation_rules": {"min": 0},
        "placeholder": "e.g., 0",
        "help_text": "Count of payments 30+ days late in past year",
        "display_order": 8,
        "scoring_weight": 1.4,
    },
]
