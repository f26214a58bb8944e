from __future__ import annotations

from typing import Any

from fastmcp import FastMCP
from pydantic import BaseModel, Field

from postcode_anywhere.app.container import Container
from postcode_anywhere.services.postcode_service import PostcodeAddressService


class AddressModel(BaseModel):
    residential: bool
    name: str | None = None
    line1: str = ""
    line2: str = ""
    street: str = ""
    town: str = ""
    county: str = ""
    country: str = ""
    postcode: str = ""
    id: str = Field("", description="Royal Mail delivery point id (UDPRN)")


class AddressLookupResponse(BaseModel):
    """LookupResult의 MCP 응답 형태."""

    postcode: str = Field(..., description="입력한 우편번호 그대로")
    error: bool | str = Field(False, description="성공이면 false, 실패면 오류 종류")
    errorDetail: str | None = Field(None, description="하위 수준 진단 메시지")
    source: str = Field(..., description="cache 또는 api")
    data: list[AddressModel] | None = Field(None, description="주소 목록 (오류 시 null)")


class AddressResponse(BaseModel):
    address: AddressModel | None = None
    source: str | None = None
    message: str | None = None


def lookup_postcode_addresses(
    service: PostcodeAddressService, postcode: str, override_cache: bool = False
) -> AddressLookupResponse:
    result = service.get(postcode, override_cache=override_cache)
    return AddressLookupResponse.model_validate(result.to_dict())


def find_address(service: PostcodeAddressService, postcode: str, address_id: str) -> AddressResponse:
    """
    우편번호 조회 결과에서 delivery point id가 일치하는 주소 하나를 고릅니다.
    """
    result = service.get(postcode)
    if not result.ok:
        return AddressResponse(source=result.source, message=str(result.error))

    wanted = str(address_id).strip()
    for record in result.data or []:
        if record.id == wanted:
            return AddressResponse(
                address=AddressModel.model_validate(record.to_dict()),
                source=result.source,
            )

    return AddressResponse(
        source=result.source,
        message=f"No address with id '{wanted}' at '{postcode}'",
    )


def register_postcode_tools(mcp: FastMCP, container: Container) -> None:
    postcode_service = container.postcode_service

    @mcp.tool(
        name="lookup_postcode_addresses",
        description=(
            "UK 우편번호로 배달 가능한 주소 목록을 조회합니다. "
            "로컬 캐시를 먼저 확인하고, 없거나 오래된 경우 Postcode Anywhere API를 호출합니다."
        ),
    )
    def lookup_postcode_addresses_tool(postcode: str, override_cache: bool = False) -> dict[str, Any]:
        """
        우편번호 → 주소 목록.

        - postcode: 예) 'SW1A 1AA'
        - override_cache: true면 캐시를 무시하고 API를 호출
        """
        return lookup_postcode_addresses(
            postcode_service, postcode, override_cache=override_cache
        ).model_dump()

    @mcp.tool(
        name="get_address",
        description=(
            "우편번호 조회 결과 중 delivery point id(UDPRN)가 일치하는 주소 하나를 반환합니다. "
            "주소 선택 폼에서 사용자가 고른 항목을 다시 확인할 때 사용합니다."
        ),
    )
    def get_address_tool(postcode: str, address_id: str) -> dict[str, Any]:
        return find_address(postcode_service, postcode, address_id).model_dump()
