"""SecureCM Meta information.
   SecureCM loads per-environment configuration files and keeps
   sensitive values encrypted at rest.
"""
__title__ = 'securecm'
__description__ = (
   'Per-environment configuration loader with encryption at rest '
   'for sensitive keys.'
)
__version__ = '2025.9.8'
__copyright__ = 'Copyright (c) 2025 Mamedul Islam'
__author__ = 'Mamedul Islam'
__license__ = 'MIT'
__url__ = 'http://mamedul.github.io'
