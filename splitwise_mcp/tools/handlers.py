"""Mapping of tool names onto Splitwise client calls.

Each handler takes the client and the (already validated) arguments and
returns the raw API result. Two argument transformations happen here:

- ID extraction: ``id`` (or ``expense_id`` for comment listing) is split
  from the remaining fields and passed positionally.
- User-array flattening: a ``users`` list is expanded into the
  ``users__<index>__<property>`` keys the Splitwise API expects.
"""

from __future__ import annotations

from collections.abc import Callable, Coroutine, Iterable, Mapping
from typing import Any

from splitwise_mcp.splitwise.client import SplitwiseClient

ToolHandler = Callable[[SplitwiseClient, dict[str, Any]], Coroutine[Any, Any, Any]]


def flatten_users(
    users: Iterable[Mapping[str, Any]],
    prefix: str = "users",
) -> dict[str, Any]:
    """Flatten a list of user objects into Splitwise's indexed key format.

    Example:
        >>> flatten_users([{"email": "a@x.com"}, {"email": "b@y.com"}])
        {'users__0__email': 'a@x.com', 'users__1__email': 'b@y.com'}

    Args:
        users: User objects; list order becomes the index. No deduplication.
        prefix: Key prefix.

    Returns:
        Flat mapping of ``<prefix>__<index>__<property>`` to value.
    """
    flattened: dict[str, Any] = {}
    for index, user in enumerate(users):
        for key, value in user.items():
            flattened[f"{prefix}__{index}__{key}"] = value
    return flattened


def _split_id(arguments: dict[str, Any], key: str = "id") -> tuple[Any, dict[str, Any]]:
    rest = dict(arguments)
    return rest.pop(key), rest


def _with_flattened_users(arguments: dict[str, Any]) -> dict[str, Any]:
    data = dict(arguments)
    users = data.pop("users", None)
    if users:
        data.update(flatten_users(users))
    return data


# === User tools ===


async def _get_current_user(client: SplitwiseClient, args: dict[str, Any]) -> Any:
    return await client.get_current_user()


async def _get_user(client: SplitwiseClient, args: dict[str, Any]) -> Any:
    return await client.get_user(args["id"])


async def _update_user(client: SplitwiseClient, args: dict[str, Any]) -> Any:
    user_id, data = _split_id(args)
    return await client.update_user(user_id, data)


# === Group tools ===


async def _get_groups(client: SplitwiseClient, args: dict[str, Any]) -> Any:
    return await client.get_groups()


async def _get_group(client: SplitwiseClient, args: dict[str, Any]) -> Any:
    return await client.get_group(args["id"])


async def _create_group(client: SplitwiseClient, args: dict[str, Any]) -> Any:
    return await client.create_group(_with_flattened_users(args))


async def _delete_group(client: SplitwiseClient, args: dict[str, Any]) -> Any:
    return await client.delete_group(args["id"])


async def _restore_group(client: SplitwiseClient, args: dict[str, Any]) -> Any:
    return await client.undelete_group(args["id"])


async def _add_user_to_group(client: SplitwiseClient, args: dict[str, Any]) -> Any:
    return await client.add_user_to_group(dict(args))


async def _remove_user_from_group(client: SplitwiseClient, args: dict[str, Any]) -> Any:
    return await client.remove_user_from_group(dict(args))


# === Friend tools ===


async def _get_friends(client: SplitwiseClient, args: dict[str, Any]) -> Any:
    return await client.get_friends()


async def _get_friend(client: SplitwiseClient, args: dict[str, Any]) -> Any:
    return await client.get_friend(args["id"])


async def _add_friend(client: SplitwiseClient, args: dict[str, Any]) -> Any:
    return await client.create_friend(dict(args))


async def _add_friends(client: SplitwiseClient, args: dict[str, Any]) -> Any:
    return await client.create_friends(flatten_users(args["users"]))


async def _remove_friend(client: SplitwiseClient, args: dict[str, Any]) -> Any:
    return await client.delete_friend(args["id"])


# === Expense tools ===


async def _get_expenses(client: SplitwiseClient, args: dict[str, Any]) -> Any:
    return await client.get_expenses(dict(args))


async def _get_expense(client: SplitwiseClient, args: dict[str, Any]) -> Any:
    return await client.get_expense(args["id"])


async def _create_expense(client: SplitwiseClient, args: dict[str, Any]) -> Any:
    return await client.create_expense(_with_flattened_users(args))


async def _update_expense(client: SplitwiseClient, args: dict[str, Any]) -> Any:
    expense_id, data = _split_id(args)
    return await client.update_expense(expense_id, _with_flattened_users(data))


async def _delete_expense(client: SplitwiseClient, args: dict[str, Any]) -> Any:
    return await client.delete_expense(args["id"])


async def _restore_expense(client: SplitwiseClient, args: dict[str, Any]) -> Any:
    return await client.undelete_expense(args["id"])


# === Comment tools ===


async def _get_comments(client: SplitwiseClient, args: dict[str, Any]) -> Any:
    expense_id, _ = _split_id(args, "expense_id")
    return await client.get_comments(expense_id)


async def _add_comment(client: SplitwiseClient, args: dict[str, Any]) -> Any:
    return await client.create_comment(dict(args))


async def _delete_comment(client: SplitwiseClient, args: dict[str, Any]) -> Any:
    return await client.delete_comment(args["id"])


# === Notification and utility tools ===


async def _get_notifications(client: SplitwiseClient, args: dict[str, Any]) -> Any:
    return await client.get_notifications(dict(args))


async def _get_currencies(client: SplitwiseClient, args: dict[str, Any]) -> Any:
    return await client.get_currencies()


async def _get_categories(client: SplitwiseClient, args: dict[str, Any]) -> Any:
    return await client.get_categories()


TOOL_HANDLERS: dict[str, ToolHandler] = {
    "splitwise_get_current_user": _get_current_user,
    "splitwise_get_user": _get_user,
    "splitwise_update_user": _update_user,
    "splitwise_get_groups": _get_groups,
    "splitwise_get_group": _get_group,
    "splitwise_create_group": _create_group,
    "splitwise_delete_group": _delete_group,
    "splitwise_restore_group": _restore_group,
    "splitwise_add_user_to_group": _add_user_to_group,
    "splitwise_remove_user_from_group": _remove_user_from_group,
    "splitwise_get_friends": _get_friends,
    "splitwise_get_friend": _get_friend,
    "splitwise_add_friend": _add_friend,
    "splitwise_add_friends": _add_friends,
    "splitwise_remove_friend": _remove_friend,
    "splitwise_get_expenses": _get_expenses,
    "splitwise_get_expense": _get_expense,
    "splitwise_create_expense": _create_expense,
    "splitwise_update_expense": _update_expense,
    "splitwise_delete_expense": _delete_expense,
    "splitwise_restore_expense": _restore_expense,
    "splitwise_get_comments": _get_comments,
    "splitwise_add_comment": _add_comment,
    "splitwise_delete_comment": _delete_comment,
    "splitwise_get_notifications": _get_notifications,
    "splitwise_get_currencies": _get_currencies,
    "splitwise_get_categories": _get_categories,
}
