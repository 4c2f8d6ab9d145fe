"""
Application Module Catalog

Declares the school-management application's modules and registers them with a
registry in dependency order:

- Core: essential system functionality
- Feature: business logic modules
- Integration: external service integrations
- Experimental: beta features behind feature flags
"""

import logging
from typing import Any, Dict, List

from feature_flags.feature_flag import FeatureFlag
from feature_flags.provider import FeatureFlagProvider

from .module_definition import ModuleConfig, ModuleStatus
from .module_registry import ModuleRegistry

logger = logging.getLogger(__name__)

AUTHOR = "RK Institute"
LICENSE = "PROPRIETARY"

ADVANCED_REPORTING = FeatureFlag("advanced_reporting")
AUDIT_LOGGING = FeatureFlag("audit_logging")
RATE_LIMITING = FeatureFlag("rate_limiting")
INPUT_VALIDATION = FeatureFlag("input_validation")
DARK_MODE = FeatureFlag("dark_mode")
ACCESSIBILITY = FeatureFlag("accessibility_enhancements")
MOBILE_OPTIMIZATION = FeatureFlag("mobile_optimization")
EMAIL_NOTIFICATIONS = FeatureFlag("email_notifications")
SMS_NOTIFICATIONS = FeatureFlag("sms_notifications")
PUSH_NOTIFICATIONS = FeatureFlag("push_notifications")
THIRD_PARTY_INTEGRATIONS = FeatureFlag("third_party_integrations")
WEBHOOK_SUPPORT = FeatureFlag("webhook_support")
REAL_TIME_COLLABORATION = FeatureFlag("real_time_collaboration")
AI_PERSONALIZATION = FeatureFlag("ai_personalization")
CACHING = FeatureFlag("caching")


def _any_enabled(flags: FeatureFlagProvider, *features: FeatureFlag) -> bool:
    return any(flags.is_enabled(feature) for feature in features)


def core_modules(flags: FeatureFlagProvider) -> List[ModuleConfig]:
    """Modules with essential functionality; everything else depends on them."""
    return [
        ModuleConfig(
            name='core',
            version='1.0.0',
            description='Core system functionality including authentication, database, and utilities',
            routes=['/api/health', '/api/auth/login', '/api/auth/logout', '/api/auth/verify'],
            components=['Layout', 'Navigation', 'Header', 'Footer', 'LoadingSpinner', 'ErrorBoundary'],
            services=['AuthService', 'DatabaseService', 'LoggingService', 'ConfigService'],
            category='core',
            priority=100,
            author=AUTHOR,
            license=LICENSE,
            requirements={'python_version': '>=3.10', 'memory_mb': 64, 'features': ['database', 'authentication']},
        ),
        ModuleConfig(
            name='security',
            version='1.0.0',
            description='Security features including input validation, rate limiting, and audit logging',
            dependencies=['core'],
            routes=['/api/security/audit', '/api/security/rate-limit'],
            components=['SecurityProvider', 'ProtectedRoute', 'AuditLog'],
            services=['SecurityService', 'AuditService', 'ValidationService'],
            enabled=_any_enabled(flags, AUDIT_LOGGING, RATE_LIMITING),
            optional_features=[AUDIT_LOGGING, RATE_LIMITING, INPUT_VALIDATION],
            category='core',
            priority=90,
            author=AUTHOR,
            license=LICENSE,
        ),
        ModuleConfig(
            name='ui-framework',
            version='1.0.0',
            description='UI framework with components, themes, and responsive design',
            dependencies=['core'],
            components=['Button', 'Input', 'Modal', 'Table', 'Card', 'Form', 'ThemeProvider', 'ResponsiveContainer'],
            services=['ThemeService', 'ResponsiveService'],
            optional_features=[DARK_MODE, ACCESSIBILITY, MOBILE_OPTIMIZATION],
            category='core',
            priority=80,
            author=AUTHOR,
            license=LICENSE,
        ),
    ]


def feature_modules(flags: FeatureFlagProvider) -> List[ModuleConfig]:
    """Business modules built on the core modules."""
    return [
        ModuleConfig(
            name='student-management',
            version='1.0.0',
            description='Complete student lifecycle management including enrollment, profiles, and family relationships',
            dependencies=['core', 'ui-framework'],
            routes=['/api/students', '/api/students/[id]', '/api/families', '/api/families/[id]',
                    '/api/students/search', '/api/students/bulk'],
            components=['StudentList', 'StudentForm', 'StudentProfile', 'FamilyForm', 'FamilyProfile',
                        'StudentSearch', 'BulkStudentActions'],
            services=['StudentService', 'FamilyService', 'EnrollmentService'],
            category='feature',
            priority=70,
            author=AUTHOR,
            license=LICENSE,
            requirements={'memory_mb': 32, 'features': ['database']},
        ),
        ModuleConfig(
            name='fee-management',
            version='1.0.0',
            description='Comprehensive fee and payment management system',
            dependencies=['core', 'student-management', 'ui-framework'],
            routes=['/api/fees', '/api/fees/[id]', '/api/payments', '/api/payments/[id]',
                    '/api/fee-structures', '/api/discounts'],
            components=['FeeList', 'FeeForm', 'PaymentForm', 'PaymentHistory', 'FeeStructureManager',
                        'DiscountManager', 'InvoiceGenerator'],
            services=['FeeService', 'PaymentService', 'InvoiceService', 'DiscountService'],
            category='feature',
            priority=60,
            author=AUTHOR,
            license=LICENSE,
        ),
        ModuleConfig(
            name='course-management',
            version='1.0.0',
            description='Course and curriculum management with scheduling',
            dependencies=['core', 'student-management', 'ui-framework'],
            routes=['/api/courses', '/api/courses/[id]', '/api/schedules', '/api/enrollments'],
            components=['CourseList', 'CourseForm', 'ScheduleManager', 'EnrollmentManager', 'CourseCalendar'],
            services=['CourseService', 'ScheduleService', 'EnrollmentService'],
            category='feature',
            priority=50,
            author=AUTHOR,
            license=LICENSE,
        ),
        ModuleConfig(
            name='reporting',
            version='1.0.0',
            description='Advanced reporting and analytics system',
            dependencies=['core', 'student-management', 'fee-management'],
            routes=['/api/reports', '/api/reports/generate', '/api/reports/templates', '/api/analytics'],
            components=['ReportGenerator', 'ReportViewer', 'ReportHistory', 'AnalyticsDashboard', 'ChartComponents'],
            services=['ReportService', 'AnalyticsService', 'ExportService'],
            enabled=flags.is_enabled(ADVANCED_REPORTING),
            required_features=[ADVANCED_REPORTING],
            category='feature',
            priority=40,
            author=AUTHOR,
            license=LICENSE,
        ),
    ]


def integration_modules(flags: FeatureFlagProvider) -> List[ModuleConfig]:
    """External service integrations."""
    return [
        ModuleConfig(
            name='communication',
            version='1.0.0',
            description='Email, SMS, and notification management',
            dependencies=['core', 'student-management'],
            routes=['/api/notifications', '/api/email', '/api/sms', '/api/templates'],
            components=['NotificationCenter', 'EmailComposer', 'SMSComposer', 'TemplateManager',
                        'CommunicationHistory'],
            services=['EmailService', 'SMSService', 'NotificationService', 'TemplateService'],
            enabled=_any_enabled(flags, EMAIL_NOTIFICATIONS, SMS_NOTIFICATIONS),
            optional_features=[EMAIL_NOTIFICATIONS, SMS_NOTIFICATIONS, PUSH_NOTIFICATIONS],
            category='integration',
            priority=30,
            author=AUTHOR,
            license=LICENSE,
        ),
        ModuleConfig(
            name='third-party-integrations',
            version='1.0.0',
            description='External API integrations and webhook support',
            dependencies=['core'],
            routes=['/api/webhooks', '/api/integrations', '/api/sync'],
            components=['IntegrationManager', 'WebhookManager', 'SyncStatus', 'APIKeyManager'],
            services=['WebhookService', 'IntegrationService', 'SyncService'],
            enabled=_any_enabled(flags, THIRD_PARTY_INTEGRATIONS, WEBHOOK_SUPPORT),
            optional_features=[THIRD_PARTY_INTEGRATIONS, WEBHOOK_SUPPORT],
            category='integration',
            priority=20,
            author=AUTHOR,
            license=LICENSE,
        ),
    ]


def experimental_modules(flags: FeatureFlagProvider) -> List[ModuleConfig]:
    """Beta modules, each behind its own feature flag."""
    return [
        ModuleConfig(
            name='realtime-collaboration',
            version='0.9.0',
            description='Real-time collaboration features including chat, presence, and collaborative editing',
            dependencies=['core', 'student-management'],
            routes=['/api/collaboration', '/api/presence', '/api/chat'],
            components=['CollaborationPanel', 'PresenceIndicator', 'ChatInterface', 'CollaborativeEditor'],
            services=['CollaborationService', 'PresenceService', 'ChatService'],
            enabled=flags.is_enabled(REAL_TIME_COLLABORATION),
            required_features=[REAL_TIME_COLLABORATION],
            optional_features=[CACHING],
            category='experimental',
            priority=10,
            author=AUTHOR,
            license=LICENSE,
        ),
        ModuleConfig(
            name='ai-personalization',
            version='0.8.0',
            description='AI-powered personalization and recommendations',
            dependencies=['core', 'student-management', 'reporting'],
            routes=['/api/ai/recommendations', '/api/ai/insights', '/api/ai/personalization'],
            components=['RecommendationEngine', 'PersonalizationPanel', 'AIInsights', 'SmartSuggestions'],
            services=['AIService', 'RecommendationService', 'PersonalizationService'],
            enabled=flags.is_enabled(AI_PERSONALIZATION),
            required_features=[AI_PERSONALIZATION],
            category='experimental',
            priority=5,
            author=AUTHOR,
            license=LICENSE,
        ),
    ]


def default_modules(flags: FeatureFlagProvider) -> List[ModuleConfig]:
    """All catalog modules in registration order."""
    return (
        core_modules(flags)
        + feature_modules(flags)
        + integration_modules(flags)
        + experimental_modules(flags)
    )


def register_modules(registry: ModuleRegistry) -> None:
    """
    Register every catalog module with the registry.

    Raises:
        ModuleRegistryError: If any module fails to register
    """
    logger.info("Registering application modules...")

    try:
        for config in default_modules(registry.feature_flags):
            registry.register(config)
    except Exception as e:
        logger.error(f"Failed to register modules: {e}")
        raise

    stats = registry.get_statistics()
    logger.info(
        f"All modules registered: {stats.total} total, {stats.enabled} enabled, "
        f"{stats.disabled} disabled, {stats.errors} errors, categories {stats.by_category}"
    )


def get_module_status(registry: ModuleRegistry) -> Dict[str, Any]:
    """Summarise the registry: statistics plus module names grouped by state."""
    modules = registry.get_all_modules()
    return {
        'statistics': registry.get_statistics().to_dict(),
        'enabled_modules': [m.name for m in modules if m.is_active],
        'disabled_modules': [m.name for m in modules if m.status != ModuleStatus.ERROR and not m.is_active],
        'error_modules': [m.name for m in modules if m.status == ModuleStatus.ERROR],
    }
