"""
REST API для приложения изучения языка: диалоги, транскрипты и выделения.
"""

__version__ = "0.1.0"
