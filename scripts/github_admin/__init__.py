"""
GitHub Organization 리포지토리 Ruleset 관리 스크립트 모음

패키지 이름이 github_admin인 이유: PyGithub의 github 패키지와 이름 충돌을 방지하기 위함.

모듈 목록:
- apply_branch_rules.py: 대상 리포지토리에 브랜치 이름 규칙/삭제 금지 ruleset 적용
- rulesets.py: Ruleset REST API 호출 (조회, 생성, 갱신)
- common.py: 환경변수, PyGithub 클라이언트, 요청 헤더
- console.py: 색상 콘솔 출력

사용 전 필수 환경변수:
- GITHUB_TOKEN: GitHub 토큰 (리포지토리 administration 권한)
- ORGANIZATION: 대상 Organization 이름
- REPOSITORIES: 대상 리포지토리 JSON 배열 (--all-repos 사용 시 불필요)

--dry-run 옵션을 지원합니다.
"""
