"""
Records seeded into an empty ledger.

Seeded categories and accounts are flagged `is_default`. Default categories
can never be deleted; default accounts follow the normal account rule.
"""

from lifeledger.models.ledger import (
    Account,
    AccountType,
    Category,
    CategoryType,
    UserSettings,
)


_EXPENSE_CATEGORIES = [
    ("Food & Dining", "UtensilsCrossed", "#FF6B6B"),
    ("Transportation", "Car", "#4ECDC4"),
    ("Shopping", "ShoppingBag", "#95E1D3"),
    ("Entertainment", "Film", "#F38181"),
    ("Bills & Utilities", "Receipt", "#AA96DA"),
    ("Healthcare", "Heart", "#FCBAD3"),
    ("Education", "GraduationCap", "#A8D8EA"),
    ("Travel", "Plane", "#FFD93D"),
    ("Fitness", "Dumbbell", "#6BCB77"),
    ("Other", "MoreHorizontal", "#95A5A6"),
]

_INCOME_CATEGORIES = [
    ("Salary", "Briefcase", "#2ECC71"),
    ("Freelance", "Laptop", "#3498DB"),
    ("Investment", "TrendingUp", "#9B59B6"),
    ("Gift", "Gift", "#E74C3C"),
    ("Other Income", "DollarSign", "#1ABC9C"),
]

_ACCOUNTS = [
    ("Cash", AccountType.CASH, "Wallet", "#10b981"),
    ("Bank Account", AccountType.BANK, "Building2", "#3b82f6"),
    ("Credit Card", AccountType.CREDIT_CARD, "CreditCard", "#8b5cf6"),
]


def default_categories() -> list[Category]:
    """Expense categories first, then income, in display order."""
    categories = [
        Category(name=name, icon=icon, color=color, type=CategoryType.EXPENSE, is_default=True)
        for name, icon, color in _EXPENSE_CATEGORIES
    ]
    categories += [
        Category(name=name, icon=icon, color=color, type=CategoryType.INCOME, is_default=True)
        for name, icon, color in _INCOME_CATEGORIES
    ]
    return categories


def default_accounts(currency: str = "USD") -> list[Account]:
    return [
        Account(
            name=name,
            type=account_type,
            currency=currency,
            icon=icon,
            color=color,
            is_default=True,
        )
        for name, account_type, icon, color in _ACCOUNTS
    ]


def default_user_settings(currency: str = "USD") -> UserSettings:
    return UserSettings(currency=currency)
