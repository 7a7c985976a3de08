"""
Starter category tree offered to new users and used by the demo seed.
Top-level names map to their subcategories; every child shares its parent's type.
"""

# Income categories
INCOME_TREE = {
    "Salary": ["Wages", "Bonus", "Commission"],
    "Business Income": ["Freelance", "Side Hustle"],
    "Investment Income": ["Dividends", "Interest", "Rental Income"],
    "Other Income": ["Gift Received", "Refund", "Transfer In"],
}

# Expense categories
EXPENSE_TREE = {
    "Housing": ["Rent", "Mortgage", "Home Insurance"],
    "Utilities": ["Electric", "Water", "Internet", "Phone"],
    "Food": ["Groceries", "Dining Out", "Coffee"],
    "Transportation": ["Fuel", "Public Transit", "Car Maintenance", "Parking"],
    "Healthcare": ["Medical", "Pharmacy", "Dental"],
    "Entertainment": ["Streaming Services", "Movies", "Hobbies"],
    "Shopping": ["Clothing", "Electronics", "Household"],
    "Education": ["Tuition", "Books", "Courses"],
    "Personal Care": ["Haircut", "Gym"],
    "Giving": ["Gifts", "Charity"],
}
