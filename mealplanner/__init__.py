"""
MealPlanner - secure local storage for the meal planner's API credentials.

Keeps the USDA FoodData Central key and the AI provider keys in the
operating system's credential vault instead of in source code.
"""

from mealplanner.constants import APP_NAME, APP_VERSION

__version__ = APP_VERSION
__app_name__ = APP_NAME

__all__ = [
    "APP_NAME",
    "APP_VERSION",
    "__version__",
    "__app_name__",
]
