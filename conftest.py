"""
Pytest configuration for Django tests.
"""
import os

import django

# Set the Django settings module
os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'order_fulfillment.settings')

# Configure Django
django.setup()
