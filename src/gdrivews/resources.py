from dataclasses import asdict,fields,is_dataclass
from typing import Self

class GoogleWorkSpaceResourceBase():
    """
    Intended to be subclassed by a dataclass but isnt actually a dataclass.
    Common base for the Drive and Sheets resource structs, handles the
    translation between the dataclass and the raw dicts the client uses.
    """
    @classmethod
    def from_response(cls, response: dict|None) -> Self:
        """
        Build from a raw API dict.  The API happily returns fields we don't
        model (and adds new ones over time) so anything unknown is dropped
        rather than blowing up the dataclass __init__.
        """
        if isinstance(response, cls):
            return response
        known = {f.name for f in fields(cls)} if is_dataclass(cls) else set()
        return cls(**{k: v for k, v in dict(response or {}).items() if k in known})

    def to_base(self) -> dict:
        """
        Default just return the dict representation of the object as needed by
        the GWS client.  Something more complicated can override.
        Call fixup() first to ensure all fields are in correct format.
        """
        self.fixup()
        return asdict(self)

    def trim(self) -> dict|None:
        """
        Return a 'trimmed' dict of the resource.  That is, removing any top level attributes
        that are an empty or None.  For empty needs to be a string, or container. For None
        needs to be a value like int or bool where 'not' could be a valid value.  This is
        for GWS requests that only want filled-in fields.
        """
        b = self.to_base()
        if b:
            vals = dict(b.items())
            for k,v in vals.items():
                if v is None or (type(v) not in [int,bool,float] and not v):
                    del b[k]
        return b

    def fixup(self) -> None:
        """
        notify a subclass to do any field adjustments
        """
        pass

def prune(value):
    """
    Recursively drop None values from dicts (and dicts inside lists) so a request
    body only carries the fields that were actually set.  None inside a list is kept
    as that is meaningful, for instance a 'leave alone' cell in a ValueRange.
    """
    if isinstance(value, dict):
        return {k: prune(v) for k, v in value.items() if v is not None}
    if isinstance(value, list):
        return [prune(v) for v in value]
    return value
