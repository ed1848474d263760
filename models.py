"""
Data models for the CRM draft (partial save) flow.
Draft records as the API delivers them, the notes payload stored inside
them, and the form state rebuilt when a draft is resumed.
"""
import json
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, List, Optional

# Placeholders written into required columns while a draft is in progress
CLIENT_NAME_PLACEHOLDER = 'PARTIAL_SAVE_IN_PROGRESS'
PROJECT_TITLE_PLACEHOLDER = 'Partial Save - In Progress'
INVESTOR_NAME_PLACEHOLDER = 'PARTIAL_SAVE_IN_PROGRESS'
VC_ROUND_TITLE_PLACEHOLDER = 'Draft VC - In Progress'

# Form state keys used by the multi-step forms for resume bookkeeping
RESUME_FROM_ID_KEY = '_resumeFromId'
LAST_SAVED_KEY = '_lastSaved'
COMPLETED_TABS_KEY = '_completedTabs'

RECORD_FIELDS = (
    'id', 'notes', 'client_name', 'project_title',
    'project_description', 'lead_source', 'created_at',
)


def _json_default(value):
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


@dataclass
class PartialSaveRecord:
    """Draft record as returned by the leads API"""
    id: Optional[int] = None
    notes: Any = None  # JSON string holding a DraftNotes payload
    client_name: Optional[str] = None
    project_title: Optional[str] = None
    project_description: Optional[str] = None
    lead_source: Optional[str] = None
    created_at: Any = None  # ISO string or datetime
    extra: Dict[str, Any] = field(default_factory=dict)  # Any other columns

    @classmethod
    def from_dict(cls, data):
        known = {name: data.get(name) for name in RECORD_FIELDS}
        extra = {key: value for key, value in data.items() if key not in RECORD_FIELDS}
        return cls(extra=extra, **known)

    def to_dict(self):
        data = dict(self.extra)
        data.update({name: getattr(self, name) for name in RECORD_FIELDS})
        return data


@dataclass
class DraftNotes:
    """Structured payload stored in a draft's notes column"""
    original_data: Dict[str, Any] = field(default_factory=dict)
    last_saved: Any = None
    completed_tabs: List[str] = field(default_factory=list)

    def to_payload(self):
        return {
            'originalData': self.original_data,
            'lastSaved': self.last_saved,
            'completedTabs': self.completed_tabs,
        }

    def to_json(self):
        return json.dumps(self.to_payload(), default=_json_default)


@dataclass
class ResumeState:
    """
    Initial state for the multi-step lead form when resuming a draft.

    Fields the form knows about are typed; every other form field travels
    in `extra`.
    """
    id: Optional[int] = None
    lead_source: Optional[str] = None
    client_name: Optional[str] = None
    project_title: Optional[str] = None
    project_description: Optional[str] = None
    resume_from_id: Optional[int] = None
    last_saved: Any = None
    completed_tabs: List[str] = field(default_factory=list)
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_form_state(self):
        """Flatten into the mapping the form uses as its initial state"""
        state = dict(self.extra)
        state.update({
            'lead_source': self.lead_source,
            'client_name': self.client_name,
            'project_title': self.project_title,
            'project_description': self.project_description,
            # Presence of id makes the form update the draft instead of inserting
            'id': self.id,
            RESUME_FROM_ID_KEY: self.resume_from_id,
            LAST_SAVED_KEY: self.last_saved,
            COMPLETED_TABS_KEY: list(self.completed_tabs),
        })
        return state


@dataclass
class DraftSummary:
    """One row of the saved drafts list"""
    id: Optional[int]
    title: str
    badge: str
    saved_ago: str
    last_saved_display: str
    project_title: Optional[str] = None
