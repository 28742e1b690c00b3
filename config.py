"""
Configuration settings for Issue Pattern Analyzer
"""
import os
from pathlib import Path

BASE_DIR = Path(__file__).parent.absolute()

APP_VERSION = '1.0.0'


class Config:
    """Base configuration"""
    SECRET_KEY = os.environ.get('SECRET_KEY', 'dev-secret-key-change-in-production')

    # Source data
    INPUT_CSV = os.environ.get('INPUT_CSV', str(BASE_DIR / 'unresolved_issues_past_3_months.csv'))
    OUTPUT_REPORT = os.environ.get('OUTPUT_REPORT', str(BASE_DIR / 'enhanced-ios-report.html'))

    # Upload settings
    MAX_CONTENT_LENGTH = 200 * 1024 * 1024  # 200MB max CSV export

    # Platform filter - only rows whose platform column equals this are analyzed
    TARGET_PLATFORM = os.environ.get('TARGET_PLATFORM', 'ios')
    PLATFORM_LABEL = os.environ.get('PLATFORM_LABEL', 'iOS')

    # Logical field -> CSV header
    COLUMN_MAP = {
        'platform': 's_meta_other_platform',
        'version': 's_meta_application_version',
        'created_date': 'd_created_date',
        'title': 's_issue_title',
        'messages': 's_messages',
        'tags': 'a_tags',
        'os_version': 's_meta_other_os_version',
        'country': 's_meta_other_country_code',
    }

    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')


class DevelopmentConfig(Config):
    """Development configuration"""
    DEBUG = True


class ProductionConfig(Config):
    """Production configuration"""
    DEBUG = False
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'WARNING')


class TestingConfig(Config):
    """Testing configuration"""
    TESTING = True
    SECRET_KEY = 'test-secret-key'


config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}
