"""
Front desk PMS backend
Rooms, check-in, checkout settlement, cleaning workflow and daily reports
"""
__version__ = "0.1.0"
