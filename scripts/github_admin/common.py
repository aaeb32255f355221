"""
GitHub API 공통 유틸리티 모듈

환경변수에서 토큰, Organization, 대상 리포지토리 목록을 읽어오고
PyGithub 클라이언트와 REST API 요청 헤더를 제공합니다.
보안을 위해 토큰은 환경변수로 관리됩니다.
"""
import json
import os
import re
from typing import Generator

from dotenv import load_dotenv
from github import Auth, Github, GithubException
from github.Organization import Organization
from github.Repository import Repository

from scripts.github_admin.console import warning

# 프로젝트 루트의 .env 파일 로드
load_dotenv()

DEFAULT_API_URL = "https://api.github.com"
REPO_NAME_PATTERN = re.compile(r"^[a-zA-Z0-9._-]+$")


def get_token() -> str:
    """
    GitHub 토큰을 환경변수에서 가져오는 함수

    GITHUB_TOKEN을 우선 사용하고, 없으면 GITHUB_ADMIN_TOKEN을 사용합니다.
    토큰은 대상 리포지토리의 administration 쓰기 권한이 필요합니다.

    Returns:
        str: GitHub 토큰

    Raises:
        ValueError: 두 환경변수 모두 설정되지 않은 경우
    """
    token = os.getenv("GITHUB_TOKEN") or os.getenv("GITHUB_ADMIN_TOKEN")
    if not token:
        raise ValueError(
            "GITHUB_TOKEN environment variable is not set. "
            "Set a token with repository administration permission."
        )
    return token


def validate_token() -> str:
    """
    실행 시작 시 한 번 토큰을 확인하는 함수

    형식이 예상과 다르면 경고를 출력합니다. get_headers는 경고 없이 get_token을 사용합니다.
    """
    token = get_token()

    # 토큰 형식 기본 검증 (ghp_, github_pat_, ghs_ 접두사)
    if not token.startswith(("ghp_", "github_pat_", "ghs_")):
        warning(
            "GitHub token format looks unusual. "
            "Check that it is a Personal Access Token, Fine-grained Token or App token."
        )
    return token


def get_org_name() -> str:
    """
    Organization 이름을 환경변수에서 가져오는 함수

    Returns:
        str: Organization 이름

    Raises:
        ValueError: ORGANIZATION, GITHUB_ORG_NAME 모두 설정되지 않은 경우
    """
    org_name = os.getenv("ORGANIZATION") or os.getenv("GITHUB_ORG_NAME")
    if not org_name:
        raise ValueError(
            "ORGANIZATION environment variable is not set. "
            "Check the .env file or the workflow environment."
        )
    return org_name


def get_api_url() -> str:
    """REST API 기본 URL (GitHub Enterprise는 GITHUB_API_URL로 지정)"""
    return os.getenv("GITHUB_API_URL", DEFAULT_API_URL).rstrip("/")


def get_headers() -> dict[str, str]:
    """
    GitHub REST API 요청에 사용할 헤더를 생성하는 함수

    Returns:
        dict: Authorization, Accept, API 버전 헤더가 포함된 딕셔너리
    """
    return {
        "Authorization": f"Bearer {get_token()}",
        "Accept": "application/vnd.github+json",
        "X-GitHub-Api-Version": "2022-11-28",
    }


def validate_repo_name(repo_name: str) -> bool:
    """
    리포지토리 이름이 유효한지 검증하는 함수

    Args:
        repo_name: 검증할 리포지토리 이름

    Returns:
        bool: 유효한 경우 True
    """
    if not repo_name:
        return False

    # GitHub 리포지토리 이름 규칙: 영문자, 숫자, -, _, . 만 허용
    return bool(REPO_NAME_PATTERN.match(repo_name))


def parse_repositories(raw: str, org_name: str | None = None) -> list[str]:
    """
    JSON 배열 문자열을 리포지토리 이름 목록으로 변환하는 함수

    "owner/name" 형식은 name만 남깁니다. 순서는 입력 순서를 유지합니다.

    Args:
        raw: JSON 배열 문자열 (예: '["repo-a", "repo-b"]')
        org_name: owner가 붙은 항목을 검증할 Organization 이름

    Returns:
        list[str]: 리포지토리 이름 목록

    Raises:
        ValueError: JSON이 아니거나, 배열이 아니거나, 이름이 유효하지 않은 경우
    """
    try:
        value = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ValueError(f"REPOSITORIES is not valid JSON: {e}") from e

    if not isinstance(value, list):
        raise ValueError("REPOSITORIES must be a JSON array of repository names")

    repos = []
    for item in value:
        if not isinstance(item, str):
            raise ValueError(f"Repository name must be a string: {item!r}")

        name = item.strip()
        if "/" in name:
            owner, name = name.split("/", 1)
            if org_name and owner.lower() != org_name.lower():
                raise ValueError(
                    f"Repository '{item}' does not belong to organization '{org_name}'"
                )

        if not validate_repo_name(name):
            raise ValueError(f"Invalid repository name: {item!r}")
        repos.append(name)

    return repos


def get_repositories(org_name: str | None = None) -> list[str]:
    """
    REPOSITORIES 환경변수에서 대상 리포지토리 목록을 가져오는 함수

    Raises:
        ValueError: REPOSITORIES 환경변수가 설정되지 않았거나 형식이 잘못된 경우
    """
    raw = os.getenv("REPOSITORIES")
    if not raw:
        raise ValueError(
            "REPOSITORIES environment variable is not set. "
            'Provide a JSON array such as ["repo-a", "repo-b"] or use --all-repos.'
        )
    return parse_repositories(raw, org_name)


def get_github_client() -> Github:
    """
    GitHub 클라이언트를 생성하는 함수 (리포지토리 목록 조회용)

    Returns:
        Github: PyGithub 클라이언트 인스턴스
    """
    base_url = get_api_url()
    return Github(auth=Auth.Token(get_token()), base_url=base_url, timeout=30, retry=3)


def get_organization(g: Github, org_name: str | None = None) -> Organization:
    """
    GitHub Organization 객체를 가져오는 함수

    Args:
        g: PyGithub 클라이언트
        org_name: Organization 이름 (None이면 환경변수에서 가져옴)

    Returns:
        Organization: PyGithub Organization 객체

    Raises:
        ValueError: Organization을 찾을 수 없는 경우
    """
    if org_name is None:
        org_name = get_org_name()

    try:
        return g.get_organization(org_name)
    except GithubException as e:
        if e.status == 404:
            raise ValueError(f"Organization '{org_name}' not found.") from e
        raise


def get_all_repos(
    org: Organization, include_forks: bool = False, include_archived: bool = False
) -> Generator[Repository, None, None]:
    """
    Organization의 모든 리포지토리를 가져오는 제너레이터 함수

    Args:
        org: PyGithub Organization 객체
        include_forks: Fork된 리포지토리 포함 여부 (기본값: False)
        include_archived: Archive된 리포지토리 포함 여부 (기본값: False)

    Yields:
        Repository: 필터링 조건을 만족하는 리포지토리
    """
    for repo in org.get_repos(type="all"):
        # Fork 리포지토리 필터링
        if not include_forks and repo.fork:
            continue

        # Archive된 리포지토리 필터링
        if not include_archived and repo.archived:
            continue

        yield repo
