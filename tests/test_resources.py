from gdrivews.resources import prune
from gdrivews.drive.resources import File, Permission

def test_from_response_drops_unknown_fields():
    f = File.from_response({"id": "x", "name": "n", "kind": "drive#file", "owners": []})
    assert(f.id == "x")
    assert(f.name == "n")
    assert(File.from_response(f) is f)
    assert(not File.from_response(None))

def test_trim():
    p = Permission(type="anyone", role="reader", allowFileDiscovery=False)
    assert(p.trim() == {"type": "anyone", "role": "reader", "allowFileDiscovery": False})

def test_prune():
    body = {"a": None, "b": {"c": None, "d": 1}, "e": [None, {"f": None}]}
    assert(prune(body) == {"b": {"d": 1}, "e": [None, {}]})
