"""Meal planner: compile nutrient and quantity constraints into a MILP and solve it."""

__version__ = "0.1.0"
