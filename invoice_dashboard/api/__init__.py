"""
HTTP blueprints for Invoice Dashboard
"""
