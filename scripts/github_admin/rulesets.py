"""
리포지토리 Ruleset REST API 모듈

Ruleset API는 PyGithub에서 직접 지원하지 않으므로 requests로 REST API를 호출합니다.

동작:
    - 같은 이름의 ruleset이 없으면 생성 (POST)
    - 같은 이름의 ruleset이 있으면 해당 ID로 갱신 (PUT)

apply_ruleset은 예외를 올리지 않고 (성공 여부, 메시지) 튜플을 반환합니다.
"""
import json
from pathlib import Path

import requests

from scripts.github_admin.common import get_api_url, get_headers
from scripts.github_admin.console import error, info, notice, success

REQUEST_TIMEOUT = 30
PAGE_SIZE = 100

# 서버가 생성하는 필드 (export한 ruleset을 그대로 재사용할 수 있도록 요청에서 제외)
SERVER_FIELDS = {
    "id",
    "node_id",
    "source",
    "source_type",
    "_links",
    "created_at",
    "updated_at",
    "current_user_can_bypass",
}


def load_ruleset_config(ruleset_path: Path) -> dict:
    """
    ruleset 설정 JSON 파일을 로드하는 함수

    Args:
        ruleset_path: ruleset 파일 경로

    Returns:
        dict: Ruleset 설정 딕셔너리

    Raises:
        FileNotFoundError: ruleset 파일이 없는 경우
        ValueError: JSON 형식이 잘못되었거나 name이 없는 경우
    """
    ruleset_path = Path(ruleset_path)
    if not ruleset_path.exists():
        raise FileNotFoundError(f"Ruleset file not found: {ruleset_path}")

    with open(ruleset_path, "r", encoding="utf-8") as f:
        try:
            config = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in {ruleset_path}: {e}") from e

    if not isinstance(config, dict):
        raise ValueError(f"Ruleset file must contain a JSON object: {ruleset_path}")
    if not isinstance(config.get("name"), str) or not config["name"]:
        raise ValueError(f"Ruleset file has no 'name': {ruleset_path}")

    return config


def build_payload(ruleset: dict) -> dict:
    """요청 본문에서 서버 생성 필드를 제거"""
    return {k: v for k, v in ruleset.items() if k not in SERVER_FIELDS}


def rulesets_url(org_name: str, repo_name: str) -> str:
    return f"{get_api_url()}/repos/{org_name}/{repo_name}/rulesets"


def list_rulesets(org_name: str, repo_name: str) -> list[dict]:
    """
    리포지토리의 모든 ruleset을 가져오는 함수

    Organization 수준 ruleset은 리포지토리 API로 갱신할 수 없으므로 제외합니다.
    Link 헤더의 next 페이지를 끝까지 따라갑니다.

    Args:
        org_name: Organization 이름
        repo_name: 리포지토리 이름

    Returns:
        list: Ruleset 목록 (리포지토리가 없으면 빈 목록)

    Raises:
        requests.HTTPError: 404 이외의 오류 응답인 경우
        requests.exceptions.InvalidJSONError: 응답 본문이 객체 배열이 아닌 경우
    """
    url = rulesets_url(org_name, repo_name)
    params = {"per_page": PAGE_SIZE, "includes_parents": "false"}
    rulesets = []

    while url:
        response = requests.get(
            url, params=params, headers=get_headers(), timeout=REQUEST_TIMEOUT
        )
        if response.status_code == 404:
            return []
        response.raise_for_status()

        page = response.json()
        if not isinstance(page, list) or not all(isinstance(r, dict) for r in page):
            raise requests.exceptions.InvalidJSONError(
                f"Unexpected rulesets response for {org_name}/{repo_name}: {page!r}",
                response=response,
            )
        rulesets.extend(page)

        # next URL에는 쿼리 파라미터가 이미 포함되어 있음
        url = response.links.get("next", {}).get("url")
        params = None

    return rulesets


def find_ruleset_by_name(
    org_name: str, repo_name: str, ruleset_name: str
) -> tuple[bool, int | None]:
    """
    특정 이름의 ruleset이 이미 존재하는지 확인하는 함수

    Returns:
        tuple: (존재 여부, ruleset ID 또는 None)
    """
    for ruleset in list_rulesets(org_name, repo_name):
        if ruleset.get("name") == ruleset_name:
            return True, ruleset.get("id")
    return False, None


def create_ruleset(org_name: str, repo_name: str, ruleset: dict) -> requests.Response:
    """Ruleset을 생성하는 함수 (POST). 응답 상태 코드는 호출자가 판단합니다."""
    return requests.post(
        rulesets_url(org_name, repo_name),
        json=build_payload(ruleset),
        headers=get_headers(),
        timeout=REQUEST_TIMEOUT,
    )


def update_ruleset(
    org_name: str, repo_name: str, ruleset_id: int, ruleset: dict
) -> requests.Response:
    """기존 Ruleset을 ID로 갱신하는 함수 (PUT)"""
    return requests.put(
        f"{rulesets_url(org_name, repo_name)}/{ruleset_id}",
        json=build_payload(ruleset),
        headers=get_headers(),
        timeout=REQUEST_TIMEOUT,
    )


def is_success(response: requests.Response) -> bool:
    return 200 <= response.status_code < 300


def error_details(response: requests.Response | None) -> tuple[str | None, str | None]:
    """
    오류 응답에서 (message, 전체 JSON 본문) 을 추출하는 함수

    JSON이 아닌 응답이면 본문 텍스트를 그대로 사용합니다.
    """
    if response is None:
        return None, None

    try:
        data = response.json()
    except ValueError:
        text = response.text or None
        return text, text

    message = data.get("message") if isinstance(data, dict) else None
    return message, json.dumps(data, indent=2, ensure_ascii=False)


def apply_ruleset(
    org_name: str, repo_name: str, ruleset: dict, dry_run: bool = False
) -> tuple[bool, str]:
    """
    리포지토리에 ruleset을 생성하거나 갱신하는 함수

    오류가 발생해도 예외를 올리지 않고 실패 결과를 반환합니다.

    Args:
        org_name: Organization 이름
        repo_name: 리포지토리 이름
        ruleset: Ruleset 설정
        dry_run: True이면 조회만 하고 생성/갱신은 하지 않음

    Returns:
        tuple: (성공 여부, 결과 메시지)
    """
    name = ruleset["name"]
    info(f"Applying ruleset '{name}' to {org_name}/{repo_name}")

    try:
        exists, ruleset_id = find_ruleset_by_name(org_name, repo_name, name)

        if dry_run:
            action = f"update (ID: {ruleset_id})" if exists else "create"
            message = f"[DRY-RUN] Would {action} ruleset '{name}'"
            notice(message)
            return True, message

        if exists:
            notice(f"Rule '{name}' already exists (ID: {ruleset_id}). Updating...")
            response = update_ruleset(org_name, repo_name, ruleset_id, ruleset)
            verb = "update"
        else:
            response = create_ruleset(org_name, repo_name, ruleset)
            verb = "create"

        if is_success(response):
            message = f"✅ {verb.capitalize()}d ruleset '{name}' successfully"
            success(message)
            return True, message

        api_message, details = error_details(response)
        message = f"❌ Failed to {verb} ruleset '{name}' (HTTP {response.status_code})"
        if api_message:
            message += f": {api_message}"
        error(message)
        if details:
            error(f"Details: {details}")
        return False, message

    except requests.exceptions.RequestException as e:
        message = f"❌ Error applying ruleset '{name}': {e}"
        error(message)
        _, details = error_details(e.response)
        if details:
            error(f"Details: {details}")
        return False, message

    except Exception as e:
        message = f"❌ Error applying ruleset '{name}': {type(e).__name__}: {e}"
        error(message)
        return False, message
