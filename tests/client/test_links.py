"""Tests for link resolution against page includes."""

from contentful_ingest.client.links import build_index, resolve_entry


def link(entry_id, link_type="Entry"):
    return {"sys": {"type": "Link", "linkType": link_type, "id": entry_id}}


def record(entry_id, record_type="Entry", **fields):
    return {"sys": {"id": entry_id, "type": record_type}, "fields": fields}


class TestLinkResolution:
    """Test resolve_entry over indexed records."""

    def test_resolves_links_inside_lists(self):
        """Links in array fields are resolved element by element."""
        tags = [record("t1", label="python"), record("t2", label="async")]
        post = record("p1", tags=[link("t1"), link("t2")])

        resolved = resolve_entry(post, build_index([post], {"Entry": tags}))

        assert [tag["fields"]["label"] for tag in resolved["fields"]["tags"]] == ["python", "async"]

    def test_unknown_link_left_untouched(self):
        """Links to records the page did not include stay as links."""
        post = record("p1", author=link("missing"))

        resolved = resolve_entry(post, build_index([post], {}))

        assert resolved["fields"]["author"] == link("missing")

    def test_cycles_are_broken(self):
        """A record linking back to an ancestor keeps the link object."""
        post = record("p1", related=link("p2"))
        other = record("p2", related=link("p1"))

        resolved = resolve_entry(post, build_index([post, other], {}))

        assert resolved["fields"]["related"]["sys"]["id"] == "p2"
        assert resolved["fields"]["related"]["fields"]["related"] == link("p1")

    def test_entry_and_asset_ids_do_not_collide(self):
        """Entries and assets with the same id are indexed separately."""
        asset = record("same", record_type="Asset", title="asset")
        entry = record("same", title="entry")
        post = record("p1", image=link("same", "Asset"), ref=link("same"))

        resolved = resolve_entry(post, build_index([post], {"Entry": [entry], "Asset": [asset]}))

        assert resolved["fields"]["image"]["fields"]["title"] == "asset"
        assert resolved["fields"]["ref"]["fields"]["title"] == "entry"

    def test_input_is_not_mutated(self):
        """Resolution works on copies."""
        post = record("p1", author=link("a1"))
        index = build_index([post], {"Entry": [record("a1", name="Ada")]})

        resolve_entry(post, index)

        assert post["fields"]["author"] == link("a1")

    def test_depth_limit(self):
        """Resolution stops descending once the depth budget is spent."""
        chain = [record("c0", next=link("c1")), record("c1", next=link("c2")), record("c2")]

        resolved = resolve_entry(chain[0], build_index(chain, {}), max_depth=1)

        assert resolved["fields"]["next"]["sys"]["id"] == "c1"
        assert resolved["fields"]["next"]["fields"]["next"] == link("c2")
