"""
Partial save (draft) service.
Builds draft payloads when a user saves an incomplete multi-step form, and
rebuilds form state from a stored draft when the user resumes it.
"""
import json
import logging
from collections.abc import Mapping
from datetime import timedelta

from models import (
    PartialSaveRecord, DraftNotes, ResumeState, DraftSummary,
    CLIENT_NAME_PLACEHOLDER, PROJECT_TITLE_PLACEHOLDER,
    INVESTOR_NAME_PLACEHOLDER, VC_ROUND_TITLE_PLACEHOLDER,
    RESUME_FROM_ID_KEY, LAST_SAVED_KEY, COMPLETED_TABS_KEY,
)
from utils import parse_timestamp, format_to_ist_datetime, get_current_ist_instant, to_utc_iso

logger = logging.getLogger(__name__)

DEFAULT_LEAD_SOURCE = 'other'
UNSAVED_DRAFT_TITLE = 'Unsaved Lead Draft'

BOOKKEEPING_KEYS = ('id', RESUME_FROM_ID_KEY, LAST_SAVED_KEY, COMPLETED_TABS_KEY)

VC_SIZE_FIELDS = ('minimum_size', 'maximum_size', 'minimum_arr_requirement')
VC_FORM_ONLY_FIELDS = ('custom_country',)
BLANK_VC_CONTACT = {
    'contact_name': '',
    'designation': '',
    'phone': '',
    'email': '',
    'linkedin': '',
}


def _as_record(record):
    if isinstance(record, PartialSaveRecord):
        return record
    if isinstance(record, Mapping):
        return PartialSaveRecord.from_dict(record)
    raise TypeError(f"Expected a partial save record, got {type(record).__name__}")


def _strip_placeholder(value, placeholder):
    return '' if value == placeholder else value


def parse_draft_notes(record):
    """
    Parse the notes payload of a draft record.

    Undecodable notes fall back to an empty payload saved at the record's
    creation time. Parts of a decoded payload with the wrong shape are
    treated as absent.
    """
    record = _as_record(record)

    if isinstance(record.notes, Mapping):
        payload = record.notes
    else:
        try:
            payload = json.loads(record.notes or '{}')
        except (TypeError, ValueError) as e:
            logger.warning("Could not parse notes of partial save %s: %s", record.id, e)
            return DraftNotes(last_saved=record.created_at)

    if not isinstance(payload, Mapping):
        logger.warning("Notes of partial save %s are not an object, ignoring them", record.id)
        payload = {}

    original_data = payload.get('originalData')
    if not isinstance(original_data, Mapping):
        original_data = {}

    completed_tabs = payload.get('completedTabs')
    if not isinstance(completed_tabs, list):
        completed_tabs = []

    return DraftNotes(
        original_data=dict(original_data),
        last_saved=payload.get('lastSaved'),
        completed_tabs=list(completed_tabs),
    )


def extract_resume_state(record):
    """
    Rebuild the lead form's initial state from a draft record.

    The saved form values come first; the record's own columns override
    them, with in-progress placeholders turned back into empty fields.
    """
    record = _as_record(record)
    notes = parse_draft_notes(record)

    state = ResumeState(
        id=record.id,
        lead_source=record.lead_source,
        client_name=_strip_placeholder(record.client_name, CLIENT_NAME_PLACEHOLDER),
        project_title=_strip_placeholder(record.project_title, PROJECT_TITLE_PLACEHOLDER),
        project_description=record.project_description,
        resume_from_id=record.id,
        last_saved=notes.last_saved,
        completed_tabs=notes.completed_tabs,
        extra=notes.original_data,
    )
    return state.to_form_state()


def _decode_contacts(value, draft_id):
    if isinstance(value, list):
        return value
    if isinstance(value, str) and value:
        try:
            contacts = json.loads(value)
        except ValueError as e:
            logger.warning("Could not parse contacts of VC draft %s: %s", draft_id, e)
        else:
            if isinstance(contacts, list):
                return contacts
    return [dict(BLANK_VC_CONTACT)]


def extract_vc_resume_state(record):
    """Rebuild the VC form's initial state from a VC draft record"""
    data = dict(record) if isinstance(record, Mapping) else _as_record(record).to_dict()
    draft_id = data.pop('id', None)
    data.pop('is_partial', None)

    if data.get('investor_name') == INVESTOR_NAME_PLACEHOLDER:
        data['investor_name'] = ''
    if data.get('round_title') == VC_ROUND_TITLE_PLACEHOLDER:
        data['round_title'] = ''

    data['contacts'] = _decode_contacts(data.get('contacts'), draft_id)
    for name in VC_SIZE_FIELDS:
        value = data.get(name)
        data[name] = '' if value is None else str(value)

    data[RESUME_FROM_ID_KEY] = draft_id
    return data


def build_partial_save(form_state, completed_tabs=None, now=None):
    """
    Build the record payload for saving an incomplete lead form.

    Empty required columns get placeholders so the row can be stored; the
    full form is kept in the notes payload. A draft that was resumed keeps
    its id so it is updated rather than duplicated.
    """
    original_data = {
        key: value for key, value in form_state.items()
        if key not in BOOKKEEPING_KEYS
    }
    notes = DraftNotes(
        original_data=original_data,
        last_saved=to_utc_iso(get_current_ist_instant(now)),
        completed_tabs=list(completed_tabs or []),
    )

    payload = {
        'lead_source': form_state.get('lead_source') or DEFAULT_LEAD_SOURCE,
        'client_name': form_state.get('client_name') or CLIENT_NAME_PLACEHOLDER,
        'project_title': form_state.get('project_title') or PROJECT_TITLE_PLACEHOLDER,
        'project_description': form_state.get('project_description'),
        'is_partial': True,
        'notes': notes.to_json(),
    }

    draft_id = form_state.get('id') or form_state.get(RESUME_FROM_ID_KEY)
    if draft_id is not None:
        payload['id'] = draft_id

    return payload


def _to_int(value, name):
    if value is None or value == '':
        return None
    try:
        return int(float(value))
    except (TypeError, ValueError, OverflowError):
        logger.warning("Ignoring non-numeric %s in VC draft: %r", name, value)
        return None


def build_vc_partial_save(form_state):
    """Build the record payload for saving an incomplete VC form"""
    payload = {
        key: value for key, value in form_state.items()
        if key not in BOOKKEEPING_KEYS and key not in VC_FORM_ONLY_FIELDS
    }

    if 'project_description' in payload:
        payload['round_description'] = payload.pop('project_description')

    payload['lead_source'] = form_state.get('lead_source') or DEFAULT_LEAD_SOURCE
    payload['round_title'] = form_state.get('round_title') or VC_ROUND_TITLE_PLACEHOLDER
    payload['investor_name'] = form_state.get('investor_name') or INVESTOR_NAME_PLACEHOLDER
    payload['country'] = form_state.get('custom_country') or form_state.get('country')
    payload['start_date'] = form_state.get('start_date') or None
    payload['targeted_end_date'] = form_state.get('targeted_end_date') or None

    for name in VC_SIZE_FIELDS:
        payload[name] = _to_int(form_state.get(name), name)

    contacts = form_state.get('contacts') or []
    payload['contacts'] = contacts if isinstance(contacts, str) else json.dumps(contacts)
    payload['is_partial'] = True

    draft_id = form_state.get(RESUME_FROM_ID_KEY)
    if draft_id is not None:
        payload['id'] = draft_id

    return payload


def _saved_ago(saved_at, now):
    if saved_at is None:
        return 'Saved time unknown'

    hours = (get_current_ist_instant(now) - saved_at) // timedelta(hours=1)
    if hours < 1:
        return 'Saved less than 1 hour ago'
    if hours < 24:
        return f"Saved {hours} hour{'' if hours == 1 else 's'} ago"
    days = hours // 24
    return f"Saved {days} day{'' if days == 1 else 's'} ago"


def summarize_partial_save(record, now=None):
    """Describe a draft for the saved drafts list"""
    record = _as_record(record)
    notes = parse_draft_notes(record)
    last_saved = notes.last_saved or record.created_at

    if record.client_name and record.client_name != CLIENT_NAME_PLACEHOLDER:
        title = record.client_name
    else:
        title = UNSAVED_DRAFT_TITLE

    project_title = record.project_title
    if not project_title or project_title == PROJECT_TITLE_PLACEHOLDER:
        project_title = None

    return DraftSummary(
        id=record.id,
        title=title,
        badge=f"{notes.completed_tabs[0]} tab" if notes.completed_tabs else 'Draft',
        saved_ago=_saved_ago(parse_timestamp(last_saved), now),
        last_saved_display=format_to_ist_datetime(last_saved),
        project_title=project_title,
    )
