"""FastAPI router for person credential CRUD endpoints."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Path, Response

from person_auth.application.dto.person_models import (
    MAX_PERSON_ID,
    PasswordChangeRequest,
    PersonCredentialsRequest,
    PersonPatchBody,
    PersonResponse,
    PersonUpdateRequest,
)
from person_auth.application.ports.person_repository_port import PersonRecord
from person_auth.application.services.person_service import PersonPatchRequest, PersonService

DEFAULT_SIGN_UP_PATH = "/person/sign-up"

PersonIdPath = Annotated[int, Path(ge=1, le=MAX_PERSON_ID)]


def build_person_router(
    *,
    person_service: PersonService,
    sign_up_path: str = DEFAULT_SIGN_UP_PATH,
) -> APIRouter:
    """Build router exposing person CRUD, sign-up and patch endpoints."""

    router = APIRouter(tags=["person"])

    @router.post(sign_up_path, response_model=PersonResponse, status_code=201)
    async def sign_up(payload: PersonCredentialsRequest) -> PersonResponse:
        person = await person_service.sign_up(login=payload.login, password=payload.password)
        return _to_response(person)

    @router.get("/person", response_model=list[PersonResponse])
    async def list_persons() -> list[PersonResponse]:
        return [_to_response(person) for person in await person_service.list_persons()]

    @router.get("/person/{person_id}", response_model=PersonResponse)
    async def get_person(person_id: PersonIdPath) -> PersonResponse:
        return _to_response(await person_service.get_person(person_id=person_id))

    @router.post("/person", response_model=PersonResponse, status_code=201)
    async def create_person(payload: PersonCredentialsRequest) -> PersonResponse:
        person = await person_service.create_person(
            login=payload.login,
            password=payload.password,
        )
        return _to_response(person)

    @router.put("/person", response_model=PersonResponse)
    async def update_person(payload: PersonUpdateRequest) -> PersonResponse:
        person = await person_service.update_person(
            person_id=payload.id,
            login=payload.login,
            password=payload.password,
        )
        return _to_response(person)

    @router.delete("/person/{person_id}")
    async def delete_person(person_id: PersonIdPath) -> Response:
        await person_service.delete_person(person_id=person_id)
        return Response(status_code=200)

    @router.patch("/person/patch", response_model=PersonResponse)
    async def patch_person(payload: PersonPatchBody) -> PersonResponse:
        person = await person_service.patch_person(
            PersonPatchRequest(
                person_id=payload.id,
                login=payload.login,
                password=payload.password,
            )
        )
        return _to_response(person)

    @router.patch("/person/patchDTO/{person_id}", response_model=PersonResponse)
    async def change_password(
        person_id: PersonIdPath,
        payload: PasswordChangeRequest,
    ) -> PersonResponse:
        person = await person_service.change_password(
            person_id=person_id,
            password=payload.password,
        )
        return _to_response(person)

    return router


def _to_response(person: PersonRecord) -> PersonResponse:
    return PersonResponse(id=person.person_id, login=person.login)
