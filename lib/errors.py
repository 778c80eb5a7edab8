"""
리소스 리로드 에러 정의

파이프라인의 각 단계는 아래 에러 중 하나를 발생시키며,
오케스트레이터가 이를 받아 리로드 전체를 중단합니다.
"""

from enum import Enum


class ReloadStep(str, Enum):
    """리로드 파이프라인 단계"""

    HOT_CONFIG = "hot_config"
    MOD_CLIENT = "mod_client"
    VENDOR_HASH = "vendor_hash"
    CSS_HASH = "css_hash"
    CLIENT_HASH = "client_hash"
    TEMPLATES = "templates"


class ResourceError(Exception):
    """리소스 파이프라인 기본 에러"""

    def __init__(
        self,
        message: str,
        path: str | None = None,
        step: ReloadStep | None = None,
    ):
        super().__init__(message)
        self.path = path
        self.step = step

    def __str__(self) -> str:
        message = super().__str__()
        if self.path:
            message = f"{message} ({self.path})"
        if self.step:
            message = f"[{self.step.value}] {message}"
        return message


class ReadError(ResourceError):
    """소스 파일/디렉토리 읽기 실패"""


class EvalError(ResourceError):
    """설정 소스 해석 실패"""


class ConfigFormatError(ResourceError):
    """해석된 설정이 요구 형식과 다름"""


class HashError(ResourceError):
    """해시 계산 중 스트림 실패"""


class RenderError(ResourceError):
    """프래그먼트/템플릿 렌더링 입력 오류"""
