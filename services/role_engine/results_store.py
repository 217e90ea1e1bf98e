# services/role_engine/results_store.py
# Read-only store of pre-computed user results (user id -> role id -> score).

import logging
import re
from typing import Dict, Mapping, Optional

import yaml

from services.role_engine.models import ResultsStoreError, Score

logger = logging.getLogger(__name__)

USER_ID_PATTERN = re.compile(r'^[A-Za-z0-9_-]{1,64}$')


def is_user_id(value) -> bool:
    return isinstance(value, str) and bool(USER_ID_PATTERN.match(value))


class ResultsStore:
    """
    In-memory stand-in for the external results store. Scores are kept as
    supplied; keys are not checked against the role catalog, since unknown
    keys are dropped when results are joined to it.
    """

    def __init__(self, results_by_user: Mapping[str, Mapping[str, Score]]):
        self._results: Dict[str, Dict[str, Score]] = {}
        for user_id, results in results_by_user.items():
            user_id = str(user_id)
            if not isinstance(results, Mapping):
                raise ResultsStoreError(f"Results for user '{user_id}' must be a mapping of role id to score")
            scores = {}
            for role_id, score in results.items():
                if isinstance(score, bool) or not isinstance(score, (int, float)):
                    raise ResultsStoreError(f"Non-numeric score {score!r} for role '{role_id}' of user '{user_id}'")
                scores[str(role_id)] = score
            self._results[user_id] = scores

    @classmethod
    def from_file(cls, file_path: str) -> "ResultsStore":
        """Loads a YAML file shaped as {users: {user_id: {role_id: score}}}."""
        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f)
        except FileNotFoundError:
            raise ResultsStoreError(f"File not found: {file_path}")
        except yaml.YAMLError as e:
            raise ResultsStoreError(f"Error parsing YAML file {file_path}: {e}")

        if not isinstance(data, dict) or not isinstance(data.get('users'), dict):
            raise ResultsStoreError(f"Expected a top-level 'users' mapping in {file_path}")

        store = cls(data['users'])
        logger.info(f"Results store loaded from {file_path}: {len(store)} users")
        return store

    def __len__(self) -> int:
        return len(self._results)

    def get_user_results(self, user_id: str) -> Optional[Dict[str, Score]]:
        """Returns a copy of the user's scores, or None for an unknown user."""
        results = self._results.get(user_id)
        if results is None:
            logger.info(f"No results stored for user {user_id}")
            return None
        return dict(results)
