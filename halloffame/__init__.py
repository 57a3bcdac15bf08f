"""
halloffame
Committee ballot service for Hall of Fame nominations.
"""
__version__ = "1.0.0"
