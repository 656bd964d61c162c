"""
설정 관리 CLI

사용 예시:
  term-epub config init    # 기본 설정 파일을 configs/ 디렉토리에 생성
  term-epub config show    # 현재 설정된 config 출력
"""

import logging
import shutil

import typer
from omegaconf import OmegaConf

from term_epub.config import (
    CONFIG_FILENAME,
    get_package_configs_dir,
    get_user_configs_dir,
    load_config,
)

logger = logging.getLogger("term_epub.cli.config")

app = typer.Typer(name="config", help="설정 관리 명령어", no_args_is_help=True)


def init_configs(force: bool = False) -> bool:
    """기본 설정 파일을 ./configs/ 에 복사. 새로 썼으면 True"""
    src = get_package_configs_dir() / CONFIG_FILENAME
    user_configs_dir = get_user_configs_dir()
    dst = user_configs_dir / CONFIG_FILENAME

    user_configs_dir.mkdir(parents=True, exist_ok=True)
    if dst.exists() and not force:
        typer.echo(f"{CONFIG_FILENAME} 이미 존재하여 건너뛰었습니다: {dst}")
        typer.echo("강제로 덮어쓰려면 --force 플래그를 사용하세요.")
        return False

    shutil.copy2(src, dst)
    typer.echo(f"✓ {CONFIG_FILENAME} 생성 완료: {dst}")
    typer.echo("필요에 따라 설정 파일을 수정하세요.")
    return True


def show_config() -> str:
    """병합된 현재 설정을 YAML 문자열로 반환"""
    user_path = get_user_configs_dir() / CONFIG_FILENAME
    source = user_path if user_path.exists() else get_package_configs_dir() / CONFIG_FILENAME
    cfg = load_config()
    return "\n".join([
        "=" * 60,
        "현재 설정 (Current Configuration)",
        f"설정 파일 위치: {source}",
        "=" * 60,
        OmegaConf.to_yaml(cfg).rstrip(),
        "=" * 60,
    ])


@app.command("init")
def init_command(
    force: bool = typer.Option(False, "--force", "-f", help="기존 파일이 있어도 덮어쓰기"),
):
    """
    기본 설정 파일 초기화

    예시:
      term-epub config init
      term-epub config init --force
    """
    init_configs(force=force)


@app.command("show")
def show_command():
    """현재 설정 출력 (패키지 기본값 + ./configs/base.yaml)"""
    typer.echo(show_config())
