"""Route collections of the Gigvora web application.

Each collection groups routes by persona and carries the defaults (icon,
memberships, roles, shell theme) that its routes inherit unless they
override them.
"""
from __future__ import annotations

COMMUNITY_MEMBERSHIPS: tuple[str, ...] = (
    "user",
    "freelancer",
    "agency",
    "company",
    "mentor",
    "headhunter",
)
VOLUNTEER_MEMBERSHIPS: tuple[str, ...] = ("volunteer", "mentor", "admin")
USER_ROLES: tuple[str, ...] = ("user", "freelancer", "agency", "company", "headhunter")
LAUNCHPAD_MEMBERSHIPS: tuple[str, ...] = ("freelancer", "mentor", "agency", "company", "admin")
SECURITY_MEMBERSHIPS: tuple[str, ...] = ("security", "trust", "admin")

ROUTE_COLLECTIONS: dict[str, dict[str, object]] = {
    "standalone": {
        "persona": "public",
        "icon": "home",
        "routes": [
            {"key": "home", "path": "/", "index": True, "module": "pages/HomePage.jsx", "title": "Home", "icon": "home"},
            {
                "key": "adminLogin",
                "path": "/admin",
                "module": "pages/AdminLoginPage.jsx",
                "title": "Admin Login",
                "icon": "shield-exclamation",
                "persona": "admin",
                "feature_flag": "admin.access",
                "shell_theme": "midnight",
            },
        ],
    },
    "public": {
        "persona": "public",
        "icon": "globe-alt",
        "routes": [
            {"path": "login", "module": "pages/LoginPage.jsx"},
            {"path": "register", "module": "pages/RegisterPage.jsx"},
            {"path": "forgot-password", "module": "pages/ForgotPasswordPage.jsx"},
            {"path": "profile/:id", "module": "pages/ProfilePage.jsx"},
            {"path": "terms", "module": "pages/TermsPage.jsx"},
            {"path": "blog/:slug", "module": "pages/BlogArticlePage.jsx"},
            {"path": "mentors", "module": "pages/MentorsPage.jsx"},
        ],
    },
    "community": {
        "persona": "community",
        "icon": "squares-2x2",
        "default_memberships": COMMUNITY_MEMBERSHIPS,
        "routes": [
            {"path": "feed", "module": "pages/FeedPage.jsx", "title": "Community Feed", "icon": "rss"},
            {"path": "gigs", "module": "pages/GigsPage.jsx"},
            {"path": "projects", "module": "pages/ProjectsPage.jsx"},
            {"path": "projects/new", "module": "pages/ProjectCreatePage.jsx"},
            {"path": "projects/:projectId", "module": "pages/ProjectDetailPage.jsx"},
            {"path": "groups", "module": "pages/GroupsPage.jsx"},
            {"path": "inbox", "module": "pages/InboxPage.jsx"},
            {"path": "settings", "module": "pages/SettingsPage.jsx"},
            {"path": "finance", "module": "pages/FinanceHubPage.jsx"},
        ],
    },
    "volunteer": {
        "persona": "volunteer",
        "icon": "heart",
        "default_memberships": VOLUNTEER_MEMBERSHIPS,
        "routes": [{"path": "volunteering", "module": "pages/VolunteeringPage.jsx"}],
    },
    "launchpad": {
        "persona": "launchpad",
        "icon": "rocket-launch",
        "default_memberships": LAUNCHPAD_MEMBERSHIPS,
        "routes": [
            {
                "path": "experience-launchpad",
                "module": "pages/LaunchpadPage.jsx",
                "title": "Experience Launchpad",
                "icon": "rocket-launch",
                "feature_flag": "launchpad.beta",
            },
        ],
    },
    "security": {
        "persona": "security",
        "icon": "shield-check",
        "default_memberships": SECURITY_MEMBERSHIPS,
        "default_shell_theme": "midnight",
        "routes": [
            {
                "path": "security-operations",
                "module": "pages/SecurityOperationsPage.jsx",
                "icon": "shield-exclamation",
                "feature_flag": "security.operations",
                "shell_theme": "midnight",
            },
        ],
    },
    "user_dashboards": {
        "persona": "member",
        "icon": "user-circle",
        "default_memberships": USER_ROLES,
        "default_roles": USER_ROLES,
        "routes": [
            {"path": "dashboard/user", "module": "pages/dashboards/UserDashboardPage.jsx"},
            {"path": "dashboard/user/projects", "module": "pages/dashboards/UserProjectManagementPage.jsx"},
            {"path": "dashboard/user/calendar", "module": "pages/dashboards/user/UserCalendarPage.jsx"},
        ],
    },
    "freelancer": {
        "persona": "freelancer",
        "icon": "briefcase",
        "default_roles": ("freelancer",),
        "default_memberships": ("freelancer",),
        "routes": [
            {"path": "dashboard/freelancer", "module": "pages/dashboards/FreelancerDashboardPage.jsx"},
            {"path": "dashboard/freelancer/planner", "module": "pages/dashboards/FreelancerPlannerPage.jsx"},
            {"path": "dashboard/freelancer/pipeline", "module": "pages/dashboards/FreelancerPipelinePage.jsx"},
            {"path": "dashboard/freelancer/disputes", "module": "pages/dashboards/freelancer/FreelancerDisputesPage.jsx"},
        ],
    },
    "company": {
        "persona": "company",
        "icon": "building-office",
        "default_roles": ("company",),
        "default_memberships": ("company",),
        "routes": [
            {"path": "dashboard/company", "module": "pages/dashboards/CompanyDashboardPage.jsx"},
            {"path": "dashboard/company/wallets", "module": "pages/dashboards/CompanyWalletManagementPage.jsx"},
            {"path": "dashboard/company/projects", "module": "pages/dashboards/CompanyProjectManagementPage.jsx"},
            {"path": "dashboard/company/calendar", "module": "pages/dashboards/CompanyCalendarPage.jsx"},
            {"path": "dashboard/company/escrow", "module": "pages/dashboards/CompanyEscrowManagementPage.jsx"},
            {"path": "dashboard/company/id-verification", "module": "pages/dashboards/CompanyIdVerificationPage.jsx"},
        ],
    },
    "agency": {
        "persona": "agency",
        "icon": "users",
        "default_roles": ("agency",),
        "default_memberships": ("agency",),
        "routes": [
            {
                "path": "dashboard/agency",
                "module": "pages/dashboards/AgencyDashboardPage.jsx",
                "allowed_roles": ("agency", "agency_admin", "admin"),
            },
            {"path": "dashboard/agency/escrow", "module": "pages/dashboards/agency/AgencyEscrowManagementPage.jsx"},
            {
                "path": "dashboard/agency/crm",
                "module": "pages/dashboards/AgencyCrmPipelinePage.jsx",
                "allowed_roles": ("agency", "agency_admin"),
            },
            {"path": "dashboard/agency/calendar", "module": "pages/dashboards/agency/AgencyCalendarPage.jsx"},
        ],
    },
    "headhunter": {
        "persona": "headhunter",
        "icon": "magnifying-glass",
        "default_roles": ("headhunter",),
        "default_memberships": ("headhunter",),
        "routes": [
            {"path": "dashboard/headhunter", "module": "pages/dashboards/HeadhunterDashboardPage.jsx"},
        ],
    },
    "mentor": {
        "persona": "mentor",
        "icon": "academic-cap",
        "default_roles": ("mentor",),
        "default_memberships": ("mentor",),
        "routes": [
            {"path": "dashboard/mentor", "module": "pages/dashboards/MentorDashboardPage.jsx"},
        ],
    },
    "launchpad_ops": {
        "persona": "launchpad-ops",
        "icon": "sparkles",
        "default_roles": ("admin", "mentor"),
        "default_memberships": ("admin", "mentor"),
        "routes": [
            {"path": "dashboard/launchpad", "module": "pages/dashboards/LaunchpadOperationsPage.jsx"},
        ],
    },
    "admin": {
        "persona": "admin",
        "icon": "shield-check",
        "default_roles": ("admin",),
        "default_memberships": ("admin",),
        "default_shell_theme": "midnight",
        "routes": [
            {
                "path": "dashboard/admin",
                "module": "pages/dashboards/AdminDashboardPage.jsx",
                "relative_path": "",
                "index": True,
                "title": "Admin Overview",
                "icon": "shield-check",
                "feature_flag": "admin.core",
                "shell_theme": "midnight",
            },
            {
                "path": "dashboard/admin/finance",
                "module": "pages/dashboards/admin/AdminFinancialManagementPage.jsx",
                "relative_path": "finance",
            },
            {
                "path": "dashboard/admin/compliance",
                "module": "pages/dashboards/admin/AdminComplianceManagementPage.jsx",
                "relative_path": "compliance",
            },
            {
                "path": "dashboard/admin/maintenance",
                "module": "pages/dashboards/admin/AdminMaintenanceModePage.jsx",
                "relative_path": "maintenance",
            },
            {
                "path": "dashboard/admin/security/two-factor",
                "module": "pages/dashboards/admin/AdminTwoFactorManagementPage.jsx",
                "relative_path": "security/two-factor",
            },
        ],
    },
}
