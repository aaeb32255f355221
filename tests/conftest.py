"""pytest 설정 파일"""

import os
import sys
from pathlib import Path

import pytest
import requests

# 프로젝트 루트를 sys.path에 추가
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

# 테스트 환경에서 필요한 환경 변수 기본값 설정
# (.env 값이 실제 GitHub 호출에 쓰이지 않도록 덮어씀)
os.environ["GITHUB_TOKEN"] = "ghp_test-dummy-token"
os.environ["ORGANIZATION"] = "test-org"
os.environ.pop("GITHUB_API_URL", None)
os.environ.pop("GITHUB_ACTIONS", None)
os.environ.pop("FORCE_COLOR", None)


class FakeResponse:
    """requests.Response 대역 (status_code, json(), links, text)"""

    def __init__(self, status_code=200, data=None, links=None, text=""):
        self.status_code = status_code
        self._data = data
        self.links = links or {}
        self.text = text

    def json(self):
        if self._data is None:
            raise ValueError("No JSON body")
        return self._data

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error", response=self)


@pytest.fixture
def fake_response():
    return FakeResponse


@pytest.fixture
def naming_rule():
    return {
        "name": "Branch Naming Convention",
        "target": "branch",
        "enforcement": "active",
        "rules": [{"type": "branch_name_pattern"}],
    }


@pytest.fixture
def delete_rule():
    return {
        "name": "Prevent Branch Deletion",
        "target": "branch",
        "enforcement": "active",
        "rules": [{"type": "deletion"}],
    }
