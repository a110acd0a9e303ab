"""
Доменное ядро приложения бронирования гостиничных номеров.
"""

__version__ = "0.1.0"
