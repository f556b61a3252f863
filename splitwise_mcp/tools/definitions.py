"""Static tool descriptors exposed through tools/list.

Tools are grouped by Splitwise resource. ``ALL_TOOLS`` concatenates the
groups in a fixed order so tools/list is stable across calls.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

_REPEAT_INTERVALS = ["never", "weekly", "fortnightly", "monthly", "yearly"]
_GROUP_TYPES = ["home", "trip", "couple", "other", "apartment", "house"]


@dataclass(frozen=True)
class ToolDescriptor:
    """A tool advertised to MCP clients.

    Attributes:
        name: Unique tool name (``splitwise_*``).
        description: Human-readable description shown to the model.
        input_schema: JSON Schema for the tool's arguments.
    """

    name: str
    description: str
    input_schema: dict[str, Any] = field(
        default_factory=lambda: {"type": "object", "properties": {}}
    )

    def to_dict(self) -> dict[str, Any]:
        """Wire form used in the tools/list result."""
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.input_schema,
        }


def _id_schema(description: str, key: str = "id") -> dict[str, Any]:
    return {
        "type": "object",
        "properties": {key: {"type": "integer", "description": description}},
        "required": [key],
    }


def get_user_tools() -> list[ToolDescriptor]:
    return [
        ToolDescriptor(
            name="splitwise_get_current_user",
            description=(
                "Get information about the currently authenticated Splitwise user, "
                "including their ID, name, email, notification settings, and default currency."
            ),
        ),
        ToolDescriptor(
            name="splitwise_get_user",
            description="Get information about another Splitwise user by their user ID.",
            input_schema=_id_schema("The user ID to fetch information for"),
        ),
        ToolDescriptor(
            name="splitwise_update_user",
            description=(
                "Update information for a Splitwise user. Can update first name, "
                "last name, email, password, locale, and default currency."
            ),
            input_schema={
                "type": "object",
                "properties": {
                    "id": {"type": "integer", "description": "The user ID to update"},
                    "first_name": {"type": "string", "description": "New first name"},
                    "last_name": {"type": "string", "description": "New last name"},
                    "email": {"type": "string", "description": "New email address"},
                    "password": {"type": "string", "description": "New password"},
                    "locale": {"type": "string", "description": 'Locale setting (e.g., "en")'},
                    "default_currency": {
                        "type": "string",
                        "description": 'Default currency code (e.g., "USD")',
                    },
                },
                "required": ["id"],
            },
        ),
    ]


def get_group_tools() -> list[ToolDescriptor]:
    return [
        ToolDescriptor(
            name="splitwise_get_groups",
            description=(
                "List all groups for the current user. Groups represent collections of "
                "users who share expenses together (e.g., household, trip, etc.)."
            ),
        ),
        ToolDescriptor(
            name="splitwise_get_group",
            description=(
                "Get detailed information about a specific group, including members, "
                "balances, and settings."
            ),
            input_schema=_id_schema("The group ID"),
        ),
        ToolDescriptor(
            name="splitwise_create_group",
            description=(
                "Create a new group. Can add users by providing their email/name or "
                "user_id. User fields should be in the format users__0__email, "
                "users__0__first_name, etc."
            ),
            input_schema={
                "type": "object",
                "properties": {
                    "name": {"type": "string", "description": "Name of the group"},
                    "group_type": {
                        "type": "string",
                        "description": (
                            "Type of group: home, trip, couple, other, apartment, or house"
                        ),
                        "enum": _GROUP_TYPES,
                    },
                    "simplify_by_default": {
                        "type": "boolean",
                        "description": "Whether to simplify debts by default",
                    },
                    "users": {
                        "type": "array",
                        "description": (
                            "Array of user objects to add to the group. Each user should "
                            "have either user_id OR (email and optionally first_name/last_name)"
                        ),
                        "items": {
                            "type": "object",
                            "properties": {
                                "user_id": {"type": "integer"},
                                "email": {"type": "string"},
                                "first_name": {"type": "string"},
                                "last_name": {"type": "string"},
                            },
                        },
                    },
                },
                "required": ["name"],
            },
        ),
        ToolDescriptor(
            name="splitwise_delete_group",
            description=(
                "Delete a group. This destroys all associated records including expenses."
            ),
            input_schema=_id_schema("The group ID to delete"),
        ),
        ToolDescriptor(
            name="splitwise_restore_group",
            description="Restore a deleted group.",
            input_schema=_id_schema("The group ID to restore"),
        ),
        ToolDescriptor(
            name="splitwise_add_user_to_group",
            description=(
                "Add a user to an existing group. Provide either user_id or "
                "email/first_name/last_name."
            ),
            input_schema={
                "type": "object",
                "properties": {
                    "group_id": {"type": "integer", "description": "The group ID"},
                    "user_id": {"type": "integer", "description": "ID of existing user to add"},
                    "email": {"type": "string", "description": "Email of user to add"},
                    "first_name": {"type": "string", "description": "First name of user to add"},
                    "last_name": {"type": "string", "description": "Last name of user to add"},
                },
                "required": ["group_id"],
            },
        ),
        ToolDescriptor(
            name="splitwise_remove_user_from_group",
            description=(
                "Remove a user from a group. Note: This only succeeds if the user has "
                "a zero balance in the group."
            ),
            input_schema={
                "type": "object",
                "properties": {
                    "group_id": {"type": "integer", "description": "The group ID"},
                    "user_id": {"type": "integer", "description": "The user ID to remove"},
                },
                "required": ["group_id", "user_id"],
            },
        ),
    ]


def get_friend_tools() -> list[ToolDescriptor]:
    return [
        ToolDescriptor(
            name="splitwise_get_friends",
            description="List all friends of the current user, including balance information.",
        ),
        ToolDescriptor(
            name="splitwise_get_friend",
            description=(
                "Get detailed information about a specific friend, including shared "
                "groups and balances."
            ),
            input_schema=_id_schema("The friend user ID"),
        ),
        ToolDescriptor(
            name="splitwise_add_friend",
            description=(
                "Add a new friend. If the user exists, first_name and last_name are "
                "ignored. If creating a new user, first_name is required."
            ),
            input_schema={
                "type": "object",
                "properties": {
                    "user_email": {"type": "string", "description": "Email address of the friend"},
                    "user_first_name": {
                        "type": "string",
                        "description": "First name (required if user does not exist)",
                    },
                    "user_last_name": {"type": "string", "description": "Last name"},
                },
                "required": ["user_email"],
            },
        ),
        ToolDescriptor(
            name="splitwise_add_friends",
            description=(
                "Add multiple friends at once. Provide users array with "
                "email/first_name/last_name for each."
            ),
            input_schema={
                "type": "object",
                "properties": {
                    "users": {
                        "type": "array",
                        "description": "Array of user objects with email, first_name, and last_name",
                        "items": {
                            "type": "object",
                            "properties": {
                                "email": {"type": "string"},
                                "first_name": {"type": "string"},
                                "last_name": {"type": "string"},
                            },
                            "required": ["email"],
                        },
                    },
                },
                "required": ["users"],
            },
        ),
        ToolDescriptor(
            name="splitwise_remove_friend",
            description=(
                "Remove a friend connection. This breaks off the friendship between "
                "the current user and the specified user."
            ),
            input_schema=_id_schema("The friend user ID to remove"),
        ),
    ]


def _expense_users_schema(description: str) -> dict[str, Any]:
    return {
        "type": "array",
        "description": description,
        "items": {
            "type": "object",
            "properties": {
                "user_id": {"type": "integer"},
                "email": {"type": "string"},
                "first_name": {"type": "string"},
                "last_name": {"type": "string"},
                "paid_share": {"type": "string", "description": "Amount this user paid"},
                "owed_share": {"type": "string", "description": "Amount this user owes"},
            },
        },
    }


def get_expense_tools() -> list[ToolDescriptor]:
    return [
        ToolDescriptor(
            name="splitwise_get_expenses",
            description=(
                "List expenses with optional filters. Can filter by group, friend, "
                "date range, or update time."
            ),
            input_schema={
                "type": "object",
                "properties": {
                    "group_id": {"type": "integer", "description": "Filter by group ID"},
                    "friend_id": {"type": "integer", "description": "Filter by friend user ID"},
                    "dated_after": {
                        "type": "string",
                        "description": "Filter expenses dated after this date (ISO 8601 format)",
                    },
                    "dated_before": {
                        "type": "string",
                        "description": "Filter expenses dated before this date (ISO 8601 format)",
                    },
                    "updated_after": {
                        "type": "string",
                        "description": "Filter expenses updated after this time (ISO 8601 format)",
                    },
                    "updated_before": {
                        "type": "string",
                        "description": "Filter expenses updated before this time (ISO 8601 format)",
                    },
                    "limit": {
                        "type": "integer",
                        "description": "Maximum number of expenses to return (default: 20)",
                    },
                    "offset": {
                        "type": "integer",
                        "description": "Offset for pagination (default: 0)",
                    },
                },
            },
        ),
        ToolDescriptor(
            name="splitwise_get_expense",
            description=(
                "Get detailed information about a specific expense, including all "
                "users involved and their shares."
            ),
            input_schema=_id_schema("The expense ID"),
        ),
        ToolDescriptor(
            name="splitwise_create_expense",
            description=(
                "Create a new expense. Can split equally among group members or specify "
                "custom shares for each user. For custom shares, provide users array "
                "with paid_share and owed_share for each user."
            ),
            input_schema={
                "type": "object",
                "properties": {
                    "cost": {
                        "type": "string",
                        "description": 'Total cost as a decimal string (e.g., "25.00")',
                    },
                    "description": {
                        "type": "string",
                        "description": "Short description of the expense",
                    },
                    "details": {
                        "type": "string",
                        "description": "Additional notes about the expense",
                    },
                    "date": {
                        "type": "string",
                        "description": "Date of expense (ISO 8601 format). Defaults to now.",
                    },
                    "repeat_interval": {
                        "type": "string",
                        "description": "Repeat frequency",
                        "enum": _REPEAT_INTERVALS,
                    },
                    "currency_code": {
                        "type": "string",
                        "description": 'Currency code (e.g., "USD")',
                    },
                    "category_id": {
                        "type": "integer",
                        "description": "Category ID from get_categories",
                    },
                    "group_id": {
                        "type": "integer",
                        "description": "Group ID (0 for expenses outside a group)",
                    },
                    "split_equally": {
                        "type": "boolean",
                        "description": "Whether to split equally among group members",
                    },
                    "users": _expense_users_schema(
                        "Array of user share objects (required if not splitting equally). "
                        "Each must have paid_share, owed_share, and either user_id or "
                        "email/first_name/last_name"
                    ),
                },
                "required": ["cost", "description"],
            },
        ),
        ToolDescriptor(
            name="splitwise_update_expense",
            description=(
                "Update an existing expense. Only include fields that are changing. "
                "If users array is provided, all shares will be overwritten."
            ),
            input_schema={
                "type": "object",
                "properties": {
                    "id": {"type": "integer", "description": "The expense ID to update"},
                    "cost": {"type": "string", "description": "Total cost as a decimal string"},
                    "description": {
                        "type": "string",
                        "description": "Short description of the expense",
                    },
                    "details": {
                        "type": "string",
                        "description": "Additional notes about the expense",
                    },
                    "date": {"type": "string", "description": "Date of expense (ISO 8601 format)"},
                    "repeat_interval": {
                        "type": "string",
                        "description": "Repeat frequency",
                        "enum": _REPEAT_INTERVALS,
                    },
                    "currency_code": {"type": "string", "description": "Currency code"},
                    "category_id": {"type": "integer", "description": "Category ID"},
                    "group_id": {"type": "integer", "description": "Group ID"},
                    "users": _expense_users_schema(
                        "Array of user share objects to update. If provided, replaces "
                        "all existing shares."
                    ),
                },
                "required": ["id"],
            },
        ),
        ToolDescriptor(
            name="splitwise_delete_expense",
            description="Delete an expense permanently.",
            input_schema=_id_schema("The expense ID to delete"),
        ),
        ToolDescriptor(
            name="splitwise_restore_expense",
            description="Restore a deleted expense.",
            input_schema=_id_schema("The expense ID to restore"),
        ),
    ]


def get_comment_tools() -> list[ToolDescriptor]:
    return [
        ToolDescriptor(
            name="splitwise_get_comments",
            description="Get all comments for a specific expense.",
            input_schema=_id_schema("The expense ID to get comments for", key="expense_id"),
        ),
        ToolDescriptor(
            name="splitwise_add_comment",
            description="Add a comment to an expense.",
            input_schema={
                "type": "object",
                "properties": {
                    "expense_id": {
                        "type": "integer",
                        "description": "The expense ID to comment on",
                    },
                    "content": {"type": "string", "description": "The comment text"},
                },
                "required": ["expense_id", "content"],
            },
        ),
        ToolDescriptor(
            name="splitwise_delete_comment",
            description="Delete a comment from an expense.",
            input_schema=_id_schema("The comment ID to delete"),
        ),
    ]


def get_notification_tools() -> list[ToolDescriptor]:
    return [
        ToolDescriptor(
            name="splitwise_get_notifications",
            description=(
                "Get recent notifications/activity for the user account. Returns "
                "expenses added/updated/deleted, comments, group changes, friend changes, etc."
            ),
            input_schema={
                "type": "object",
                "properties": {
                    "updated_after": {
                        "type": "string",
                        "description": (
                            "Only return notifications after this time (ISO 8601 format)"
                        ),
                    },
                    "limit": {
                        "type": "integer",
                        "description": (
                            "Maximum number of notifications to return (0 for maximum)"
                        ),
                    },
                },
            },
        ),
    ]


def get_utility_tools() -> list[ToolDescriptor]:
    return [
        ToolDescriptor(
            name="splitwise_get_currencies",
            description=(
                "Get a list of all currencies supported by Splitwise. Returns ISO 4217 "
                "currency codes."
            ),
        ),
        ToolDescriptor(
            name="splitwise_get_categories",
            description=(
                "Get a list of all expense categories supported by Splitwise. Use "
                "subcategory IDs when creating expenses."
            ),
        ),
    ]


ALL_TOOLS: tuple[ToolDescriptor, ...] = (
    *get_user_tools(),
    *get_group_tools(),
    *get_friend_tools(),
    *get_expense_tools(),
    *get_comment_tools(),
    *get_notification_tools(),
    *get_utility_tools(),
)


def get_all_tools() -> list[ToolDescriptor]:
    """Return every tool in catalog order."""
    return list(ALL_TOOLS)
