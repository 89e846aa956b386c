"""HR intranet package.

Organized by feature modules (employees, goals, recommendations, assessments)
with a thin Flask controller layer over service/repository layers.
"""
