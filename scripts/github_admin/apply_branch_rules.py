"""
Organization의 리포지토리에 브랜치 Ruleset 두 개를 적용하는 스크립트

적용되는 Ruleset:
    - branch-naming-rule.json: 브랜치 이름 패턴 강제
    - prevent-delete-rule.json: 브랜치 삭제 금지

사용법:
    python scripts/github_admin/apply_branch_rules.py [--dry-run] [--all-repos] [--config-dir DIR]

옵션:
    --dry-run: 실제 변경 없이 각 리포지토리에서 생성/갱신 중 무엇을 할지 확인
    --all-repos: REPOSITORIES 대신 Organization의 모든 리포지토리에 적용 (fork, archive 제외)
    --config-dir: ruleset JSON 파일이 있는 디렉터리 (기본값: 스크립트 옆 configs/)

환경변수:
    GITHUB_TOKEN: 리포지토리 administration 권한이 있는 토큰
    ORGANIZATION: 대상 Organization 이름
    REPOSITORIES: 대상 리포지토리 이름의 JSON 배열 (예: '["repo-a", "repo-b"]')

리포지토리는 순서대로 하나씩 처리하며, 두 ruleset 중 하나라도 적용되면 성공으로 집계합니다.
개별 리포지토리의 실패는 전체 실행을 중단시키지 않습니다 (종료 코드 0).
"""
import argparse
import os
import sys
from pathlib import Path

# 프로젝트 루트를 Python 경로에 추가
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(__file__))))

from scripts.github_admin.common import (
    get_all_repos,
    get_github_client,
    get_org_name,
    get_organization,
    get_repositories,
    validate_token,
)
from scripts.github_admin.console import error, heading, info, success
from scripts.github_admin.rulesets import apply_ruleset, load_ruleset_config

SCRIPT_DIR = Path(__file__).parent
DEFAULT_CONFIG_DIR = SCRIPT_DIR / "configs"

# 적용 순서대로 나열 (이름 규칙 → 삭제 금지)
RULESET_FILES = [
    "branch-naming-rule.json",
    "prevent-delete-rule.json",
]


class RunCounters:
    """실행 결과 집계 (total_repos == rules_applied + rules_failed)"""

    def __init__(self, total_repos: int):
        self.total_repos = total_repos
        self.rules_applied = 0
        self.rules_failed = 0

    def __repr__(self):
        return (
            f"RunCounters(total_repos={self.total_repos}, "
            f"rules_applied={self.rules_applied}, rules_failed={self.rules_failed})"
        )


def load_rulesets(config_dir: Path) -> list[dict]:
    """
    적용할 ruleset 설정들을 순서대로 로드하는 함수

    Raises:
        FileNotFoundError: 설정 파일이 없는 경우
        ValueError: 설정 파일 형식이 잘못된 경우
    """
    return [load_ruleset_config(Path(config_dir) / filename) for filename in RULESET_FILES]


def process_repository(
    org_name: str,
    repo_name: str,
    rulesets: list[dict],
    counters: RunCounters,
    dry_run: bool = False,
) -> int:
    """
    하나의 리포지토리에 모든 ruleset을 적용하는 함수

    앞선 ruleset의 결과와 상관없이 모든 ruleset을 시도합니다.
    하나 이상 성공하면 rules_applied, 모두 실패하면 rules_failed를 증가시킵니다.

    Returns:
        int: 성공한 ruleset 수
    """
    heading(f"\n🔄 PROCESSING: {org_name}/{repo_name}")

    applied = 0
    for ruleset in rulesets:
        ok, _ = apply_ruleset(org_name, repo_name, ruleset, dry_run=dry_run)
        if ok:
            applied += 1

    if applied > 0:
        counters.rules_applied += 1
        success(
            f"✅ Successfully applied {applied}/{len(rulesets)} rules "
            f"to {org_name}/{repo_name}"
        )
    else:
        counters.rules_failed += 1
        error(f"❌ Failed to apply any rules to {org_name}/{repo_name}")

    return applied


def print_summary(counters: RunCounters) -> None:
    info("\nℹ️ SUMMARY")
    info(f"ℹ️ Total repositories processed: {counters.total_repos}")
    success(
        f"✅ Repositories with rules applied successfully: {counters.rules_applied}"
    )
    error(f"❌ Repositories with failed rule application: {counters.rules_failed}")
    info(
        f"{counters.rules_applied}/{counters.total_repos} repositories "
        "processed successfully"
    )


def run(
    org_name: str, repos: list[str], rulesets: list[dict], dry_run: bool = False
) -> RunCounters:
    """
    리포지토리 목록을 순서대로 처리하고 요약을 출력하는 함수

    Args:
        org_name: Organization 이름
        repos: 리포지토리 이름 목록 (처리 순서)
        rulesets: 적용할 ruleset 설정 목록
        dry_run: dry-run 모드 여부

    Returns:
        RunCounters: 집계 결과
    """
    counters = RunCounters(len(repos))
    names = ", ".join(f"'{r['name']}'" for r in rulesets)
    info(
        f"Starting branch protection rules application for {len(repos)} repositories "
        f"(rulesets: {names})"
    )

    for repo_name in repos:
        process_repository(org_name, repo_name, rulesets, counters, dry_run=dry_run)

    print_summary(counters)
    return counters


def resolve_repositories(org_name: str, all_repos: bool) -> list[str]:
    """대상 리포지토리 목록 (--all-repos이면 PyGithub로 Organization 전체 조회)"""
    if not all_repos:
        return get_repositories(org_name)

    g = get_github_client()
    org = get_organization(g, org_name)
    return [repo.name for repo in get_all_repos(org)]


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Apply the branch naming and branch deletion rulesets to organization repositories."
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Only report whether each ruleset would be created or updated",
    )
    parser.add_argument(
        "--all-repos",
        action="store_true",
        help="Target every non-fork, non-archived repository instead of REPOSITORIES",
    )
    parser.add_argument(
        "--config-dir",
        type=Path,
        default=DEFAULT_CONFIG_DIR,
        help=f"Directory containing {' and '.join(RULESET_FILES)}",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)

    try:
        rulesets = load_rulesets(args.config_dir)

        # 토큰이 없으면 리포지토리 처리 전에 실패
        validate_token()
        org_name = get_org_name()
        repos = resolve_repositories(org_name, args.all_repos)

        run(org_name, repos, rulesets, dry_run=args.dry_run)
    except Exception as e:
        error(f"❌ Error in main function: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
