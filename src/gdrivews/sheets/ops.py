"""
Thin wrappers around the Sheets v4 service calls.
Each takes the session explicitly, the session builds the service and
executes the request so error mapping and the auth retry hook live in
one place.
"""
import logging
from collections.abc import Iterable

from .resources import *
from .requests import *

logger = logging.getLogger(__name__)

def _service(session):
    return session.get_service("sheets", "v4")

def get(session, spreadsheetid: str,
        ranges: list[str] = [],
        includeGridData: bool = False,
        fields: str|None = None) -> Spreadsheet:
    """
    Wrapper for calling the get() spreadsheet method.
    See https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/get
    This is for retrieving spreadsheet properties but can also include data
    if you need it.
    """
    ret = Spreadsheet()
    if spreadsheetid:
        args = {"spreadsheetId": spreadsheetid,
                "ranges": [str(r) for r in ranges],
                "includeGridData": includeGridData}
        if fields:
            args["fields"] = fields
        response = session.execute(_service(session).spreadsheets().get(**args))
        if response:
            ret = Spreadsheet.from_response(response)
            # a fields mask can leave the ID out
            if not ret.spreadsheetId:
                ret.spreadsheetId = spreadsheetid
    return ret

def batchUpdate(session, spreadsheetid: str,
                request: GoogleSheetsUpdateRequest|dict) -> GoogleSheetsUpdateRequestResponse:
    """
    Wrapper for calling the batchUpdate() spreadsheet method.
    See https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/batchUpdate
    This is for altering any spreadsheet properties but not actual data read/write/clear
    which is done from the values() resource.
    """
    body = request.to_base() if isinstance(request, GoogleSheetsUpdateRequest) else request
    logger.debug("batchUpdate %s: %d request(s)", spreadsheetid, len(body.get("requests", [])))
    response = session.execute(_service(session).spreadsheets().batchUpdate(spreadsheetId=spreadsheetid,
                                                                            body=body))
    if response:
        return GoogleSheetsUpdateRequestResponse.from_response(response)
    return GoogleSheetsUpdateRequestResponse()

def updateValues(session, spreadsheetId: str,
                 data: ValueRange|list[ValueRange],
                 valueInputOption: str = "USER") -> UpdateValuesRequestResponse:
    """
    Wrapper for calling the batchUpdate() method on the values resource.
    See https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets.values/batchUpdate
    Write the cell data to the specified ranges.  A None inside the values
    means 'leave this cell alone'.
    """
    dlist = [d.to_base() for d in data] if isinstance(data, Iterable) else [data.to_base()]
    value_input = GoogleSheetsEnum.valueInputOption(valueInputOption)
    if not value_input:
        raise ValueError(f"Invalid valueInputOption value: {valueInputOption}")
    response = UpdateValuesRequestResponse(spreadsheetId)
    if len(dlist) > 0:
        body = {
            "valueInputOption": value_input,
            "data": dlist
        }
        logger.debug("values.batchUpdate %s: %s", spreadsheetId, [d["range"] for d in dlist])
        values = _service(session).spreadsheets().values()
        r = session.execute(values.batchUpdate(spreadsheetId=spreadsheetId, body=body))
        if r:
            response = UpdateValuesRequestResponse.from_response(r)
    return response
