"""Tests for the spreadsheet export."""
from io import BytesIO
import pytest
from openpyxl import Workbook, load_workbook
from tssr_backend.blueprints.export import FORM_SHEETS, INDEXED_SHEETS
from tssr_backend.services.export_service import (
    Section, write_sheet, label_for, format_value, XLSX_MIMETYPE
)


def export(client):
    response = client.get('/api/export/S1')
    assert response.status_code == 200
    return load_workbook(BytesIO(response.data))


def labels(sheet):
    return [row[0] for row in sheet.iter_rows(min_row=1, max_col=1, values_only=True)]


def indexed_block(title):
    """Height of one entry block and the field rows of an indexed sheet."""
    layout = next(layout for sheet_title, _, layout in INDEXED_SHEETS if sheet_title == title)
    section = layout[-1]
    return len(section.fields) + 1, [key for _, key in section.fields]


def test_export_download(client, survey):
    response = client.get('/api/export/S1')
    assert response.status_code == 200
    assert response.mimetype == XLSX_MIMETYPE
    assert 'site-export-S1.xlsx' in response.headers['Content-Disposition']

    workbook = load_workbook(BytesIO(response.data))
    assert len(workbook.sheetnames) == 1 + len(FORM_SHEETS) + len(INDEXED_SHEETS)
    assert workbook.sheetnames[:3] == ['Survey', 'Site Location', 'Site Access']
    assert workbook.sheetnames[-4:] == ['New Antennas', 'New Radio Units', 'New FPFHs', 'New MW']


def test_survey_and_site_cells(client, survey):
    client.put('/api/site-location/S1', json={'sitename': 'Hilltop', 'longitude': 39.66})
    client.put('/api/site-access/S1', json={'contact_person_name': 'Jane Doe', 'keys_type': ['Padlock', 'Code']})
    client.put('/api/site-visit-info/S1', json={'survey_date': '2024-03-05'})
    workbook = export(client)

    sheet = workbook['Survey']
    assert (sheet['A1'].value, sheet['B1'].value) == ('Field', 'Value')
    assert (sheet['A3'].value, sheet['B3'].value) == ('Site ID', 'SITE-001')

    sheet = workbook['Site Location']
    assert (sheet['A2'].value, sheet['B2'].value) == ('Site ID', 'SITE-001')
    assert (sheet['A3'].value, sheet['B3'].value) == ('Site Name', 'Hilltop')
    assert (sheet['A6'].value, sheet['B6'].value) == ('Longitude', 39.66)
    assert sheet['A8'].value == 'Elevation'

    sheet = workbook['Site Access']
    assert sheet['A2'].value == 'Site Access Permission Required'
    assert (sheet['A3'].value, sheet['B3'].value) == ('Contact Person Name', 'Jane Doe')
    assert (sheet['A7'].value, sheet['B7'].value) == ('Keys Type', 'Padlock, Code')

    sheet = workbook['Site Visit Info']
    assert (sheet['A2'].value, sheet['B2'].value) == ('Survey Date', '2024-03-05')
    assert sheet['A6'].value == 'Nokia Rep Name'


def test_cabinet_blocks_have_fixed_rows(client, survey):
    client.put('/api/outdoor-cabinets/S1', json={
        'number_of_cabinets': 2,
        'cabinets': [{'vendor': 'Nokia'}, {'vendor': '=HYPERLINK("x")', 'blvdFreeCBs': 3}],
    })
    sheet = export(client)['Outdoor Cabinets']
    assert (sheet['A2'].value, sheet['B2'].value) == ('Number of Cabinets', 2)
    assert sheet['A3'].value == 'Cabinet 1'
    assert (sheet['A6'].value, sheet['B6'].value) == ('Vendor', 'Nokia')
    assert sheet['A29'].value == 'Cabinet 2'
    assert sheet['A32'].value == 'Vendor'
    assert sheet['B32'].value == '=HYPERLINK("x")'
    assert sheet['B32'].data_type == 's'
    assert sheet['A237'].value == 'Cabinet 10'


def test_layout_does_not_depend_on_data(client, survey):
    empty = export(client)
    client.put('/api/new-antennas/S1/2', json={'sector_number': '3'})
    client.put('/api/external-dc-distribution/S1', json={
        'has_separate_dc_pdu': 'Yes', 'pdu_count': 1, 'dc_pdus': [{'dc_distribution_model': 'DC panel'}],
    })
    filled = export(client)
    for title in ('New Antennas', 'External DC Distribution', 'Radio Units', 'AC Connection'):
        assert labels(filled[title]) == labels(empty[title])


def test_indexed_entry_lands_in_its_block(client, survey):
    client.put('/api/new-antennas/S1/2', json={'sector_number': '3', 'antenna_technology': ['4G', '5G']})
    client.put('/api/new-fpfh/S1/3', json={'fpfh_location': 'On tower'})
    workbook = export(client)

    sheet = workbook['New Antennas']
    assert (sheet['A2'].value, sheet['B2'].value) == ('New Antennas Planned', 1)
    assert sheet['A3'].value == 'New Antenna 1'
    height, keys = indexed_block('New Antennas')
    heading = 3 + height
    assert sheet.cell(row=heading, column=1).value == 'New Antenna 2'
    sector_row = heading + 1 + keys.index('sector_number')
    assert sheet.cell(row=sector_row, column=1).value == 'Sector Number'
    assert sheet.cell(row=sector_row, column=2).value == '3'
    technology_row = heading + 1 + keys.index('antenna_technology')
    assert sheet.cell(row=technology_row, column=2).value == '4G, 5G'
    # Block 1 stays empty
    assert sheet.cell(row=sector_row - height, column=2).value in (None, '')

    sheet = workbook['New FPFHs']
    height, keys = indexed_block('New FPFHs')
    location_row = 3 + 2 * height + 1 + keys.index('fpfh_location')
    assert sheet.cell(row=location_row, column=2).value == 'On tower'


def test_formula_text_is_kept_as_text(client, survey):
    client.put('/api/new-radio-units/S1/1', json={'new_radio_unit_model': '=1+1'})
    sheet = export(client)['New Radio Units']
    _, keys = indexed_block('New Radio Units')
    cell = sheet.cell(row=4 + keys.index('new_radio_unit_model'), column=2)
    assert cell.value == '=1+1'
    assert cell.data_type == 's'


def test_export_unknown_survey(client):
    response = client.get('/api/export/NOPE')
    assert response.status_code == 404
    assert response.get_json()['type'] == 'NOT_FOUND'


def test_section_slots_are_capped():
    workbook = Workbook()
    layout = [('Count', 'count'), Section('Item', 'items', [('Name', 'name'), ('Size', 'details.size')], 2)]
    sheet = write_sheet(workbook, 'Items', layout, {
        'count': 3,
        'items': [{'name': 'a', 'details': {'size': 4}}, {'name': 'b'}, {'name': 'c'}],
    })
    assert (sheet['A2'].value, sheet['B2'].value) == ('Count', 3)
    assert sheet['A3'].value == 'Item 1'
    assert (sheet['A4'].value, sheet['B4'].value) == ('Name', 'a')
    assert sheet['B5'].value == 4
    assert sheet['A6'].value == 'Item 2'
    assert sheet['B7'].value == 'b'
    assert sheet.max_row == 8


def test_section_places_entries_by_index():
    workbook = Workbook()
    layout = [Section('Link', 'links', [('Name', 'name')], 3, index_key='mw_index')]
    sheet = write_sheet(workbook, 'Links', layout, {'links': [{'mw_index': 3, 'name': 'far'}]})
    assert sheet['B3'].value in (None, '')
    assert sheet['A6'].value == 'Link 3'
    assert sheet['B7'].value == 'far'


@pytest.mark.parametrize('name, label', [
    ('blvdFreeCBs', 'BLVD Free CBs'),
    ('number_of_cabinets', 'Number of Cabinets'),
    ('site_elevation', 'Elevation'),
    ('dc_feed_distribution_type', 'DC Feed Distribution Type'),
])
def test_label_for(name, label):
    assert label_for(name) == label


@pytest.mark.parametrize('value, expected', [
    (None, ''),
    (True, 'Yes'),
    ([], ''),
    (['2G', '4G'], '2G, 4G'),
    ([{'file_url': '/uploads/a.png'}, {'file_url': '/uploads/b.png'}], '/uploads/a.png, /uploads/b.png'),
    ({'notes': 'ok', 'rows': [1]}, '{"notes": "ok", "rows": [1]}'),
])
def test_format_value(value, expected):
    assert format_value(value) == expected
