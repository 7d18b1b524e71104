# ============================================================================
# SCOPE: PATIENT API
# Description: HTTP adapter for the appointment booking workflow. One booking
#              session wraps one BookingController; every action returns the
#              resulting session snapshot.
# ============================================================================
"""
Appointment Booking API.

Endpoints are grouped by the view they drive:
- Sessions (create, read, leave)
- Step 1: patient information
- Step 2: provider selection
- Step 3: slot selection
- Error view, confirmation view and modification form
"""

import hashlib
import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Response, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.api.schemas.booking import (
    AppointmentDetailsUpdate,
    BookingActionResponse,
    BookingSessionResponse,
    DepartmentResponse,
    DepartmentSelection,
    PatientInfoUpdate,
    ProviderChoice,
    ProviderFiltersUpdate,
    ProviderModeUpdate,
    ProviderResponse,
    SlotChoice,
    SlotDateSelection,
)
from app.core.container import DependencyContainer, get_container
from app.core.domain import EntityNotFoundException, InvalidOperationException
from app.domains.appointment_booking.domain.services import count_by_department
from app.domains.appointment_booking.domain.value_objects import BookingState
from app.domains.appointment_booking.infrastructure import BookingSession
from app.domains.appointment_booking.workflow import BookingController

logger = logging.getLogger(__name__)

router = APIRouter(tags=["booking"])

bearer_scheme = HTTPBearer(auto_error=False)


# ============================================================
# DEPENDENCIES
# ============================================================


def get_di_container() -> DependencyContainer:
    return get_container()


def get_bearer_token(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),  # noqa: B008
) -> str:
    """
    Extract the bearer token.

    The token is only required to be present here. Whether it identifies a
    patient is decided by the workflow's verification step.
    """
    if credentials is None or not credentials.credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return credentials.credentials


def owner_key(token: str) -> str:
    """Stable session owner derived from the token, never the token itself."""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


async def get_booking_session(
    session_id: str,
    token: str = Depends(get_bearer_token),  # noqa: B008
    container: DependencyContainer = Depends(get_di_container),  # noqa: B008
) -> BookingSession:
    try:
        return await container.get_session_store().get(session_id, owner_key(token))
    except EntityNotFoundException as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message) from e


# ============================================================
# HELPERS
# ============================================================


def _snapshot(session: BookingSession) -> BookingSessionResponse:
    return BookingSessionResponse(session_id=session.session_id, **session.controller.snapshot())


def _action(session: BookingSession, accepted: bool, result: dict[str, Any] | None = None) -> BookingActionResponse:
    return BookingActionResponse(accepted=accepted, result=result, session=_snapshot(session))


def _require_state(controller: BookingController, operation: str, *states: BookingState) -> None:
    if controller.state not in states:
        raise InvalidOperationException(operation, controller.state.value)


# ============================================================
# DIRECTORY
# ============================================================


@router.get("/providers", response_model=list[ProviderResponse])
async def list_providers(container: DependencyContainer = Depends(get_di_container)):  # noqa: B008
    """List every provider in the directory."""
    providers = await container.get_provider_directory().list_providers()
    return [ProviderResponse(**p.to_dict()) for p in providers]


@router.get("/departments", response_model=list[DepartmentResponse])
async def list_departments(container: DependencyContainer = Depends(get_di_container)):  # noqa: B008
    """List departments with the number of providers in each."""
    directory = container.get_provider_directory()
    providers = await directory.list_providers()
    departments = await directory.list_departments()
    counts = count_by_department(departments, providers)
    return [DepartmentResponse(**d.to_dict(), provider_count=counts.get(d.id, 0)) for d in departments]


# ============================================================
# SESSIONS
# ============================================================


@router.post("/sessions", response_model=BookingSessionResponse, status_code=status.HTTP_201_CREATED)
async def create_session(
    token: str = Depends(get_bearer_token),  # noqa: B008
    container: DependencyContainer = Depends(get_di_container),  # noqa: B008
):
    """
    Start a booking workflow.

    The new session begins at patient verification. An unknown token still
    gets a session; its verification step reports that sign-in is required.
    """
    controller = container.create_booking_controller_for_token(token)
    session = container.get_session_store().create(owner_key(token), controller)
    async with session.lock:
        await controller.start()
    return _snapshot(session)


@router.get("/sessions/{session_id}", response_model=BookingSessionResponse)
async def get_session(session: BookingSession = Depends(get_booking_session)):  # noqa: B008
    return _snapshot(session)


@router.delete("/sessions/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_session(
    session: BookingSession = Depends(get_booking_session),  # noqa: B008
    container: DependencyContainer = Depends(get_di_container),  # noqa: B008
):
    """
    Leave the workflow.

    An unconfirmed draft is abandoned and its held slot released. A confirmed
    appointment is kept.
    """
    async with session.lock:
        await container.get_session_store().close(session.session_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ============================================================
# NAVIGATION
# ============================================================


@router.post("/sessions/{session_id}/advance", response_model=BookingActionResponse)
async def advance(session: BookingSession = Depends(get_booking_session)):  # noqa: B008
    """
    Commit the current step and move forward.

    On the slot step this submits the appointment; the submission outcome is
    returned in ``result``.
    """
    async with session.lock:
        controller = session.controller
        was_slot_step = controller.state == BookingState.STEP3_SELECT_SLOT
        accepted = await controller.advance()
        result = controller.last_result.to_dict() if was_slot_step and controller.last_result else None
        return _action(session, accepted, result)


@router.post("/sessions/{session_id}/back", response_model=BookingActionResponse)
async def go_back(session: BookingSession = Depends(get_booking_session)):  # noqa: B008
    async with session.lock:
        accepted = await session.controller.go_back()
        return _action(session, accepted)


# ============================================================
# STEP 1 - PATIENT INFORMATION
# ============================================================


@router.patch("/sessions/{session_id}/patient-info", response_model=BookingActionResponse)
async def update_patient_info(
    payload: PatientInfoUpdate,
    session: BookingSession = Depends(get_booking_session),  # noqa: B008
):
    """Edit patient information fields; returns current validation errors."""
    async with session.lock:
        controller = session.controller
        _require_state(controller, "update_patient_info", BookingState.STEP1_VERIFY)
        errors = controller.verification.update_fields(payload.changed_fields())
        return _action(session, True, {"errors": errors})


# ============================================================
# STEP 2 - PROVIDER SELECTION
# ============================================================


@router.put("/sessions/{session_id}/provider-filters", response_model=BookingActionResponse)
async def set_provider_filters(
    payload: ProviderFiltersUpdate,
    session: BookingSession = Depends(get_booking_session),  # noqa: B008
):
    async with session.lock:
        step = session.controller.provider_selection
        _require_state(session.controller, "set_provider_filters", BookingState.STEP2_SELECT_PROVIDER)
        if payload.search is not None:
            step.set_search(payload.search)
        if payload.specialty is not None:
            step.set_specialty(payload.specialty)
        return _action(session, True, {"count": len(step.filtered_providers)})


@router.put("/sessions/{session_id}/provider-mode", response_model=BookingActionResponse)
async def set_provider_mode(
    payload: ProviderModeUpdate,
    session: BookingSession = Depends(get_booking_session),  # noqa: B008
):
    async with session.lock:
        _require_state(session.controller, "switch_mode", BookingState.STEP2_SELECT_PROVIDER)
        session.controller.provider_selection.switch_mode(payload.mode)
        return _action(session, True)


@router.put("/sessions/{session_id}/department", response_model=BookingActionResponse)
async def select_department(
    payload: DepartmentSelection,
    session: BookingSession = Depends(get_booking_session),  # noqa: B008
):
    """Drill into a department, or return to the grid with a null id."""
    async with session.lock:
        step = session.controller.provider_selection
        _require_state(session.controller, "select_department", BookingState.STEP2_SELECT_PROVIDER)
        if payload.department_id is None:
            step.clear_department()
        else:
            step.select_department(payload.department_id)
        return _action(session, True)


@router.put("/sessions/{session_id}/provider", response_model=BookingActionResponse)
async def choose_provider(
    payload: ProviderChoice,
    session: BookingSession = Depends(get_booking_session),  # noqa: B008
):
    async with session.lock:
        _require_state(session.controller, "choose_provider", BookingState.STEP2_SELECT_PROVIDER)
        provider = session.controller.provider_selection.choose(payload.provider_id)
        return _action(session, True, {"provider": provider.to_dict()})


@router.post("/sessions/{session_id}/providers/retry", response_model=BookingActionResponse)
async def retry_provider_load(session: BookingSession = Depends(get_booking_session)):  # noqa: B008
    """Reload providers and departments after a load failure."""
    async with session.lock:
        _require_state(session.controller, "retry_provider_load", BookingState.STEP2_SELECT_PROVIDER)
        loaded = await session.controller.provider_selection.retry()
        return _action(session, loaded)


# ============================================================
# STEP 3 - SLOT SELECTION
# ============================================================


@router.put("/sessions/{session_id}/slot-date", response_model=BookingActionResponse)
async def select_slot_date(
    payload: SlotDateSelection,
    session: BookingSession = Depends(get_booking_session),  # noqa: B008
):
    """Load the slots of one date; suggests alternatives if the provider is off."""
    async with session.lock:
        _require_state(session.controller, "select_date", BookingState.STEP3_SELECT_SLOT)
        listing = await session.controller.slot_selection.select_date(payload.date)
        return _action(session, listing is not None)


@router.put("/sessions/{session_id}/slot", response_model=BookingActionResponse)
async def choose_slot(
    payload: SlotChoice,
    session: BookingSession = Depends(get_booking_session),  # noqa: B008
):
    """
    Pick a time slot.

    The slot is re-checked at selection time. When another patient took it in
    the meantime the result status is ``race_lost`` and the slot is shown as
    unavailable from then on.
    """
    async with session.lock:
        _require_state(session.controller, "select_slot", BookingState.STEP3_SELECT_SLOT)
        result = await session.controller.slot_selection.select_slot(payload.slot_id)
        return _action(session, result.selected, result.to_dict())


@router.put("/sessions/{session_id}/slot-details", response_model=BookingActionResponse)
async def set_slot_details(
    payload: AppointmentDetailsUpdate,
    session: BookingSession = Depends(get_booking_session),  # noqa: B008
):
    async with session.lock:
        step = session.controller.slot_selection
        _require_state(session.controller, "set_appointment_details", BookingState.STEP3_SELECT_SLOT)
        if payload.appointment_type is not None:
            step.set_appointment_type(payload.appointment_type)
        if payload.reason is not None:
            step.set_reason(payload.reason)
        step.set_notification_prefs(email=payload.email, sms=payload.sms)
        return _action(session, True, {"errors": step.validate()})


# ============================================================
# ERROR VIEW
# ============================================================


@router.post("/sessions/{session_id}/retry", response_model=BookingActionResponse)
async def retry_submission(session: BookingSession = Depends(get_booking_session)):  # noqa: B008
    """Back to the slot step with all data kept."""
    async with session.lock:
        return _action(session, await session.controller.retry())


@router.post("/sessions/{session_id}/restart", response_model=BookingActionResponse)
async def restart(session: BookingSession = Depends(get_booking_session)):  # noqa: B008
    async with session.lock:
        return _action(session, await session.controller.restart())


@router.post("/sessions/{session_id}/dashboard", response_model=BookingActionResponse)
async def return_to_dashboard(session: BookingSession = Depends(get_booking_session)):  # noqa: B008
    async with session.lock:
        return _action(session, await session.controller.return_to_dashboard())


# ============================================================
# CONFIRMATION VIEW
# ============================================================


@router.post("/sessions/{session_id}/modify", response_model=BookingActionResponse)
async def modify(session: BookingSession = Depends(get_booking_session)):  # noqa: B008
    async with session.lock:
        return _action(session, await session.controller.modify())


@router.post("/sessions/{session_id}/done", response_model=BookingActionResponse)
async def done(session: BookingSession = Depends(get_booking_session)):  # noqa: B008
    async with session.lock:
        return _action(session, await session.controller.done())


# ============================================================
# MODIFICATION FORM
# ============================================================


@router.put("/sessions/{session_id}/modification", response_model=BookingActionResponse)
async def update_modification(
    payload: AppointmentDetailsUpdate,
    session: BookingSession = Depends(get_booking_session),  # noqa: B008
):
    """Edit the mutable fields of a confirmed appointment (not saved yet)."""
    async with session.lock:
        form = session.controller.modification
        _require_state(session.controller, "update_modification", BookingState.MODIFYING)
        if payload.appointment_type is not None:
            form.set_appointment_type(payload.appointment_type)
        if payload.reason is not None:
            form.set_reason(payload.reason)
        form.set_notification_prefs(email=payload.email, sms=payload.sms)
        return _action(session, True, {"errors": form.errors})


@router.post("/sessions/{session_id}/modification/save", response_model=BookingActionResponse)
async def save_modification(session: BookingSession = Depends(get_booking_session)):  # noqa: B008
    async with session.lock:
        return _action(session, await session.controller.save_modification())


@router.post("/sessions/{session_id}/modification/discard", response_model=BookingActionResponse)
async def discard_modification(session: BookingSession = Depends(get_booking_session)):  # noqa: B008
    async with session.lock:
        return _action(session, await session.controller.discard_modification())


@router.post("/sessions/{session_id}/modification/cancel-request", response_model=BookingActionResponse)
async def request_cancellation(session: BookingSession = Depends(get_booking_session)):  # noqa: B008
    """First step of cancelling: asks for confirmation."""
    async with session.lock:
        return _action(session, session.controller.request_cancellation())


@router.post("/sessions/{session_id}/modification/cancel-abort", response_model=BookingActionResponse)
async def keep_appointment(session: BookingSession = Depends(get_booking_session)):  # noqa: B008
    async with session.lock:
        return _action(session, session.controller.keep_appointment())


@router.post("/sessions/{session_id}/modification/cancel-confirm", response_model=BookingActionResponse)
async def confirm_cancellation(session: BookingSession = Depends(get_booking_session)):  # noqa: B008
    """Cancel the appointment. Terminal for the session's workflow."""
    async with session.lock:
        return _action(session, await session.controller.confirm_cancellation())

