"""Builders for OpenBeta GraphQL payloads and a canned client."""
from unittest.mock import MagicMock

import requests

from tufo.clients import parse_area


def climb_node(uuid, name, sport=False, trad=False, bouldering=False, yds=None,
               description=None, lat=None, lng=None, media=None):
    return {
        "name": name,
        "uuid": uuid,
        "type": {"trad": trad, "sport": sport, "bouldering": bouldering, "tr": False},
        "grades": {"yds": yds},
        "metadata": {"lat": lat, "lng": lng},
        "content": {"description": description},
        "media": [{"mediaUrl": url} for url in (media or [])],
    }


def area_node(name, uuid, lat=None, lng=None, children=(), climbs=()):
    return {
        "area_name": name,
        "uuid": uuid,
        "metadata": {"lat": lat, "lng": lng},
        "children": list(children),
        "climbs": list(climbs),
    }


def graphql_payload(*areas):
    return {"data": {"areas": list(areas)}}


def greenbelt_tree():
    """Barton Creek Greenbelt -> Gus Fruh -> Main Wall with three climbs."""
    return area_node(
        "Barton Creek Greenbelt", "bcg-uuid", lat=30.2445, lng=-97.8019,
        children=[
            area_node(
                "Gus Fruh", "gus-uuid", lat=30.2470, lng=-97.7960,
                children=[
                    area_node(
                        "Main Wall", "wall-uuid",
                        climbs=[
                            climb_node("c-sabbath", "Black Sabbath", sport=True, yds="5.10a",
                                       description="Edges."),
                            climb_node("c-crack", "Crack Attack", trad=True, yds="5.9"),
                            climb_node("c-boulder", "Lowball", bouldering=True, sport=True),
                        ],
                    ),
                ],
            ),
        ],
    )


def mock_response(status_code=200, json_data=None):
    """Create a mock requests.Response object."""
    resp = MagicMock(spec=requests.Response)
    resp.status_code = status_code
    resp.ok = 200 <= status_code < 300
    if json_data is not None:
        resp.json.return_value = json_data
    else:
        resp.json.side_effect = ValueError("No JSON")
    return resp


class FakeOpenBetaClient:
    """Serves canned trees keyed by the searched name."""

    def __init__(self, trees=None):
        self.trees = trees or {}
        self.calls = []

    def search_areas(self, name):
        self.calls.append(name)
        tree = self.trees.get(name, [])
        if isinstance(tree, Exception):
            raise tree
        return [parse_area(node) for node in tree]

    def close(self):
        pass
