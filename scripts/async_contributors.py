#!/usr/bin/env python3
"""Asynchronous pyredux example.

Performs two dependent GitHub API requests from a ``dispatch_async`` task:
1) list the user's repositories,
2) list contributors of the first repository,
then dispatches the result.  Any failure is turned into an error action.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter  # noqa: E402

from pyredux import Store  # noqa: E402

try:
    import aiohttp
except ImportError as exc:  # pragma: no cover - environment/setup issue
    raise SystemExit(
        "Missing dependency 'aiohttp'. Install with: pip install 'pyredux[examples]'",
    ) from exc

_LOG = logging.getLogger("async_contributors")

GITHUB_API = "https://api.github.com"


class Repo(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str
    full_name: str


class Contributor(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    login: str
    contributions: int = 0


class AppState(BaseModel):
    model_config = ConfigDict(frozen=True)

    contributors: tuple[Contributor, ...] = ()
    error: str | None = None
    is_fetching: bool = False


@dataclass(frozen=True)
class FetchContributorsRequest:
    pass


@dataclass(frozen=True)
class FetchContributorsResponse:
    contributors: tuple[Contributor, ...]


@dataclass(frozen=True)
class FetchContributorsError:
    message: str


Action = FetchContributorsRequest | FetchContributorsResponse | FetchContributorsError


def reducer(state: AppState, action: Action) -> AppState:
    match action:
        case FetchContributorsRequest():
            return state.model_copy(update={"is_fetching": True, "error": None})
        case FetchContributorsResponse(contributors=contributors):
            return state.model_copy(update={"contributors": contributors, "is_fetching": False})
        case FetchContributorsError(message=message):
            return state.model_copy(update={"error": message, "is_fetching": False})
    return state


_REPOS = TypeAdapter(list[Repo])
_CONTRIBUTORS = TypeAdapter(list[Contributor])


class GitHubService:
    """Thin aiohttp wrapper for the two endpoints this example needs."""

    def __init__(self, session: aiohttp.ClientSession) -> None:
        self._session = session

    async def _get_json(self, path: str) -> Any:
        async with self._session.get(f"{GITHUB_API}{path}") as response:
            response.raise_for_status()
            return await response.json()

    async def repos(self, user: str) -> list[Repo]:
        return _REPOS.validate_python(await self._get_json(f"/users/{user}/repos"))

    async def contributors(self, owner: str, repo: str) -> list[Contributor]:
        return _CONTRIBUTORS.validate_python(await self._get_json(f"/repos/{owner}/{repo}/contributors"))


def fetch_contributors(user: str) -> Callable[..., Any]:
    async def task(dispatch: Callable[[Action], Action], get_state: Callable[[], AppState]) -> AppState:
        try:
            dispatch(FetchContributorsRequest())
            async with aiohttp.ClientSession(timeout=aiohttp.ClientTimeout(total=15)) as session:
                github = GitHubService(session)

                # first request
                repos = asyncio.create_task(github.repos(user))
                found = await repos
                if not found:
                    raise LookupError(f"User {user!r} has no public repositories")

                # second request depends on the first
                contributors = asyncio.create_task(github.contributors(user, found[0].name))
                dispatch(FetchContributorsResponse(tuple(await contributors)))
        except (aiohttp.ClientError, LookupError, ValueError) as exc:
            _LOG.debug("Fetching contributors failed", exc_info=True)
            dispatch(FetchContributorsError(str(exc)))
        return get_state()

    return task


async def run(user: str, verbose: bool) -> AppState:
    store: Store[AppState, Action, None] = Store(AppState(), reducer, debug=verbose)
    store.subscribe(lambda state: print(f"onNewState: {state}"))
    return await store.dispatch_async(fetch_contributors(user))


def main() -> None:
    parser = argparse.ArgumentParser(description="Fetch contributors of a user's first GitHub repository.")
    parser.add_argument("user", nargs="?", default="grzegorzdyrda", help="GitHub user name")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    else:
        logging.basicConfig(level=logging.WARNING)

    final = asyncio.run(run(args.user, args.verbose))
    if final.error:
        raise SystemExit(f"error: {final.error}")


if __name__ == "__main__":
    main()
