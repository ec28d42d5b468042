"""
Configuration for the Website Analyzer.

Values are read from the environment once at import time. Modules look
them up through this module at call time, so tests can patch them.
"""

import os

GEMINI_API_KEY = os.environ.get('GEMINI_API_KEY')
GEMINI_MODEL = os.environ.get('GEMINI_MODEL', 'gemini-2.5-flash')
API_URL = os.environ.get('API_URL', 'http://localhost:3000')
USER_AGENT = f'WebAnalyzerAPI/1.0 (+{API_URL})'
ACCEPT = 'text/html,application/xhtml+xml'

# Network budgets
FETCH_TIMEOUT_MS = int(os.environ.get('FETCH_TIMEOUT_MS', '10000'))
ENHANCE_TIMEOUT_SECONDS = float(os.environ.get('ENHANCE_TIMEOUT_SECONDS', '30'))

# Extraction thresholds
MIN_PARAGRAPH_LENGTH = 50
DESCRIPTION_FALLBACK_LENGTH = 240
TRUNCATION_MARKER = '...'
