"""Role and permission policy for tenant users.

The policy is a static table from role to permission set. It seeds every
new tenant database and answers permission checks without touching the
database, so checks are pure functions of (role, permission).
"""

from __future__ import annotations

from enum import StrEnum
from types import MappingProxyType
from typing import Iterable, Mapping


class Permission(StrEnum):
    """Permission atoms granted to roles."""

    # Leads
    VIEW_LEADS = "view_leads"
    CREATE_LEADS = "create_leads"
    EDIT_LEADS = "edit_leads"
    DELETE_LEADS = "delete_leads"
    REASSIGN_LEADS = "reassign_leads"
    CONVERT_LEADS = "convert_leads"
    DISMISS_LEADS = "dismiss_leads"

    # Users
    VIEW_USERS = "view_users"
    CREATE_USERS = "create_users"
    EDIT_USERS = "edit_users"
    DELETE_USERS = "delete_users"
    MANAGE_ROLES = "manage_roles"
    INVITE_USERS = "invite_users"

    # Teams
    VIEW_TEAMS = "view_teams"
    MANAGE_TEAMS = "manage_teams"
    ASSIGN_TEAM_MEMBERS = "assign_team_members"

    # Settings
    VIEW_SETTINGS = "view_settings"
    EDIT_SETTINGS = "edit_settings"
    MANAGE_MODULES = "manage_modules"
    MANAGE_LEAD_SOURCES = "manage_lead_sources"
    MANAGE_LEAD_STATUSES = "manage_lead_statuses"
    MANAGE_BRANCHES = "manage_branches"
    MANAGE_DEPARTMENTS = "manage_departments"

    # Products and services
    VIEW_PRODUCTS = "view_products"
    MANAGE_PRODUCTS = "manage_products"
    VIEW_SERVICES = "view_services"
    MANAGE_SERVICES = "manage_services"
    MANAGE_CATEGORIES = "manage_categories"
    MANAGE_VENDORS = "manage_vendors"

    # Contracts
    VIEW_CONTRACTS = "view_contracts"
    CREATE_CONTRACTS = "create_contracts"
    EDIT_CONTRACTS = "edit_contracts"
    DELETE_CONTRACTS = "delete_contracts"
    MANAGE_CONTRACT_TEMPLATES = "manage_contract_templates"

    # Finance
    VIEW_FINANCIAL = "view_financial"
    MANAGE_INVOICES = "manage_invoices"
    MANAGE_PAYMENTS = "manage_payments"
    MANAGE_TAXES = "manage_taxes"
    MANAGE_CURRENCIES = "manage_currencies"
    MANAGE_PAYMENT_METHODS = "manage_payment_methods"

    # Targets
    VIEW_TARGETS = "view_targets"
    MANAGE_TARGETS = "manage_targets"
    VIEW_TEAM_PERFORMANCE = "view_team_performance"

    # Reports
    VIEW_REPORTS = "view_reports"
    EXPORT_DATA = "export_data"
    VIEW_ACTIVITY_LOGS = "view_activity_logs"

    # Account
    EDIT_PERSONAL_INFO = "edit_personal_info"
    EDIT_COMPANY_INFO = "edit_company_info"
    MANAGE_COMPANY_DETAILS = "manage_company_details"


class Role(StrEnum):
    """Baseline roles seeded into every tenant database."""

    ADMIN = "Admin"
    MANAGER = "Manager"
    SALES = "Sales"
    FINANCE = "Finance"
    ASSISTANT = "Assistant"


OWNER_ROLE = Role.ADMIN

P = Permission

_SALES = frozenset(
    {
        P.VIEW_LEADS, P.CREATE_LEADS, P.EDIT_LEADS, P.REASSIGN_LEADS,
        P.CONVERT_LEADS, P.VIEW_USERS, P.VIEW_TEAMS, P.VIEW_SETTINGS,
        P.VIEW_PRODUCTS, P.VIEW_SERVICES, P.VIEW_CONTRACTS,
        P.CREATE_CONTRACTS, P.EDIT_CONTRACTS, P.VIEW_TARGETS,
        P.VIEW_TEAM_PERFORMANCE, P.VIEW_REPORTS, P.EDIT_PERSONAL_INFO,
    }
)  # fmt: skip

_FINANCE = frozenset(
    {
        P.VIEW_LEADS, P.VIEW_USERS, P.VIEW_SETTINGS, P.VIEW_PRODUCTS,
        P.VIEW_SERVICES, P.VIEW_CONTRACTS, P.VIEW_FINANCIAL,
        P.MANAGE_INVOICES, P.MANAGE_PAYMENTS, P.MANAGE_TAXES,
        P.MANAGE_CURRENCIES, P.MANAGE_PAYMENT_METHODS, P.VIEW_REPORTS,
        P.EXPORT_DATA, P.VIEW_ACTIVITY_LOGS, P.EDIT_PERSONAL_INFO,
    }
)  # fmt: skip

_ASSISTANT = frozenset(
    {
        P.VIEW_LEADS, P.VIEW_USERS, P.VIEW_TEAMS, P.VIEW_SETTINGS,
        P.VIEW_PRODUCTS, P.VIEW_SERVICES, P.VIEW_CONTRACTS, P.VIEW_TARGETS,
        P.VIEW_REPORTS, P.EDIT_PERSONAL_INFO,
    }
)  # fmt: skip

_MANAGER = frozenset(
    {
        P.VIEW_LEADS, P.CREATE_LEADS, P.EDIT_LEADS, P.REASSIGN_LEADS,
        P.CONVERT_LEADS, P.DISMISS_LEADS, P.VIEW_USERS, P.INVITE_USERS,
        P.VIEW_TEAMS, P.MANAGE_TEAMS, P.ASSIGN_TEAM_MEMBERS,
        P.VIEW_SETTINGS, P.VIEW_PRODUCTS, P.MANAGE_PRODUCTS,
        P.VIEW_SERVICES, P.MANAGE_SERVICES, P.VIEW_CONTRACTS,
        P.CREATE_CONTRACTS, P.EDIT_CONTRACTS, P.MANAGE_CONTRACT_TEMPLATES,
        P.VIEW_TARGETS, P.MANAGE_TARGETS, P.VIEW_TEAM_PERFORMANCE,
        P.VIEW_REPORTS, P.EXPORT_DATA, P.VIEW_ACTIVITY_LOGS,
        P.EDIT_PERSONAL_INFO,
    }
)  # fmt: skip

ROLE_PERMISSIONS: Mapping[Role, frozenset[Permission]] = MappingProxyType(
    {
        Role.ADMIN: frozenset(Permission),
        Role.MANAGER: _MANAGER,
        Role.SALES: _SALES,
        Role.FINANCE: _FINANCE,
        Role.ASSISTANT: _ASSISTANT,
    }
)


def permissions_for(role: str) -> frozenset[Permission]:
    """Permissions granted to a role; unknown roles get none."""
    try:
        return ROLE_PERMISSIONS[Role(role)]
    except ValueError:
        return frozenset()


def has_permission(role: str, permission: str) -> bool:
    """Whether ``role`` grants ``permission``."""
    return permission in permissions_for(role)


def any_role_has_permission(roles: Iterable[str], permission: str) -> bool:
    return any(has_permission(role, permission) for role in roles)
