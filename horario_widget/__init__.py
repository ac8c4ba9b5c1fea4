"""
Horario widget service: home-screen widget refresh and app bridge for Agenda AI
"""

__version__ = "1.0.0"
