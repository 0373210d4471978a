"""Spreadsheet export of one survey.

Every sheet is written from a declared layout: a list of ``(label, key)``
rows and ``Section`` blocks. Row 1 is a header and each layout item owns a
fixed range of rows below it, so a field always lands in the same cell
whatever was filled in. Keys are dotted paths into the module's serialized
data.
"""
import json
import logging
import re
from io import BytesIO
from pydantic import BaseModel
from openpyxl import Workbook
from openpyxl.styles import Font, PatternFill

logger = logging.getLogger(__name__)

XLSX_MIMETYPE = 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'

# Report labels for fields whose generated label reads badly
LABELS = {
    'sitename': 'Site Name',
    'site_elevation': 'Elevation',
    'other_telecom_operator_exist_onsite': 'Other Telecom Operators Onsite',
    'location_of_existing_telecom_racks_cabinets': 'Location of Existing Racks/Cabinets',
    'location_of_planned_new_telecom_racks_cabinets': 'Location of Planned Racks/Cabinets',
    'nokia_representative_name': 'Nokia Rep Name',
    'nokia_representative_title': 'Nokia Rep Title',
    'customer_representative_name': 'Customer Rep Name',
    'customer_representative_title': 'Customer Rep Title',
}

ACRONYMS = {'ac', 'dc', 'ct', 'cb', 'cbs', 'bts', 'ran', 'mw', 'gps', 'pdu', 'fpfh', 'hs', 'id', 'blvd', 'llvd'}
SMALL_WORDS = {'of', 'to', 'by', 'for', 'at', 'in', 'on', 'and', 'from'}

HEADER_FONT = Font(bold=True, color='FFFFFF')
HEADER_FILL = PatternFill('solid', fgColor='124191')
SECTION_FONT = Font(bold=True)


class Section:
    """A repeated block: ``max_items`` slots of ``fields`` under a numbered title.

    Entries are placed by their ``index_key`` value when given, otherwise by
    list position. Every slot is written, filled or not.
    """

    def __init__(self, title, key, fields, max_items, index_key=None):
        self.title = title
        self.key = key
        self.fields = fields
        self.max_items = max_items
        self.index_key = index_key

    def slots(self, entries):
        placed = {}
        for position, entry in enumerate(entries or [], start=1):
            if not isinstance(entry, dict):
                continue
            slot = entry.get(self.index_key) if self.index_key else position
            if isinstance(slot, int) and 1 <= slot <= self.max_items:
                placed[slot] = entry
            else:
                logger.warning(f"{self.title} {slot} does not fit the report and was left out")
        return placed


def label_for(name):
    """Report label for a field name, e.g. ``blvdFreeCBs`` -> ``BLVD Free CBs``."""
    if name in LABELS:
        return LABELS[name]
    words = re.sub(r'(?<=[a-z0-9])(?=[A-Z])', '_', name).split('_')
    words = [w.upper() if w.lower() in ACRONYMS else w for w in words if w]
    return ' '.join(
        w if n and w in SMALL_WORDS else w[:1].upper() + w[1:] for n, w in enumerate(words)
    )


def schema_fields(schema, prefix='', expand=None):
    """Rows for the declared fields of a Pydantic model, nested models inlined."""
    expand = expand or {}
    rows = []
    for name, info in schema.model_fields.items():
        key = f"{prefix}{name}"
        annotation = info.annotation
        if key in expand:
            rows.extend(expand[key])
        elif isinstance(annotation, type) and issubclass(annotation, BaseModel) and annotation.model_fields:
            rows.extend(schema_fields(annotation, f"{key}.", expand))
        else:
            rows.append((label_for(name), key))
    return rows


def form_layout(service, expand=None, skip=()):
    """Layout of a FormService: derived counts, then its columns, then images.

    ``expand`` replaces the row of a key (top level or nested) with other
    layout items, e.g. a Section for a list of sub-entries.
    """
    expand = expand or {}
    layout = [(label_for(name), name) for name in service.derived_counts if name not in skip]
    for name, spec in service.fields.items():
        if name in skip:
            continue
        if name in expand:
            layout.extend(expand[name])
        elif spec.kind == 'json' and isinstance(spec.schema, type) and issubclass(spec.schema, BaseModel) \
                and spec.schema.model_fields:
            layout.extend(schema_fields(spec.schema, f"{name}.", expand))
        else:
            layout.append((label_for(name), name))
    images = service.image_service
    if images is not None and 'index' not in images.field_pattern.groupindex:
        layout.append((label_for('images'), 'images'))
    return layout


def resolve(data, key):
    value = data
    for part in key.split('.'):
        if not isinstance(value, dict):
            return None
        value = value.get(part)
    return value


def format_value(value):
    if value is None:
        return ''
    if isinstance(value, bool):
        return 'Yes' if value else 'No'
    if isinstance(value, (int, float, str)):
        return value
    if isinstance(value, list) and all(isinstance(item, dict) and 'file_url' in item for item in value):
        return ', '.join(item['file_url'] for item in value)
    if isinstance(value, list) and not any(isinstance(item, (dict, list)) for item in value):
        return ', '.join(str(item) for item in value)
    if not value:
        return ''
    return json.dumps(value, ensure_ascii=False, sort_keys=True)


def write_row(sheet, row, label, value):
    sheet.cell(row=row, column=1, value=label)
    value = format_value(value)
    cell = sheet.cell(row=row, column=2, value=value)
    if isinstance(value, str) and value.startswith('='):
        # user text, never a formula
        cell.data_type = 's'


def write_sheet(workbook, title, layout, data):
    """Write ``data`` at the fixed rows given by ``layout``."""
    sheet = workbook.create_sheet(title=title[:31])
    sheet['A1'] = 'Field'
    sheet['B1'] = 'Value'
    for cell in (sheet['A1'], sheet['B1']):
        cell.font = HEADER_FONT
        cell.fill = HEADER_FILL

    row = 2
    for item in layout:
        if isinstance(item, Section):
            placed = item.slots(resolve(data, item.key))
            for slot in range(1, item.max_items + 1):
                entry = placed.get(slot, {})
                sheet.cell(row=row, column=1, value=f"{item.title} {slot}").font = SECTION_FONT
                row += 1
                for label, key in item.fields:
                    write_row(sheet, row, label, resolve(entry, key))
                    row += 1
        else:
            label, key = item
            write_row(sheet, row, label, resolve(data, key))
            row += 1

    sheet.column_dimensions['A'].width = 45
    sheet.column_dimensions['B'].width = 60
    return sheet


SURVEY_LAYOUT = [
    ('Session ID', 'session_id'),
    ('Site ID', 'site_id'),
    ('Country', 'country'),
    ('CT', 'ct'),
    ('Project', 'project'),
    ('Company', 'company'),
    ('TSSR Status', 'tssr_status'),
    ('Created At', 'created_at'),
]


def build_workbook(survey, sheets):
    """Build the export workbook.

    Args:
        survey: Serialized survey row
        sheets: ``(title, layout, data)`` triples in sheet order, see write_sheet

    Returns:
        BytesIO: The saved .xlsx file, rewound
    """
    workbook = Workbook()
    workbook.remove(workbook.active)
    write_sheet(workbook, 'Survey', SURVEY_LAYOUT, survey)
    for title, layout, data in sheets:
        write_sheet(workbook, title, layout, data)

    output = BytesIO()
    workbook.save(output)
    output.seek(0)
    logger.info(f"Built export workbook for session {survey['session_id']} with {len(workbook.sheetnames)} sheets")
    return output
