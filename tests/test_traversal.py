"""Tests for the scene graph traversal producing the osgjs document."""

from __future__ import annotations

import json
import logging

import numpy as np
import pytest

from osgjs_export.document import writer
from osgjs_export.encoding import WriteVisitor, encode
from osgjs_export.errors import StructuralError
from osgjs_export.models import (
    AnimationManager,
    Animation,
    AttributeArray,
    Channel,
    DrawArrays,
    DrawElements,
    Drawable,
    Geode,
    Geometry,
    Group,
    IndexType,
    Light,
    LightSource,
    Material,
    MatrixTransform,
    PositionAttitudeTransform,
    PrimitiveMode,
    Projection,
    StateSet,
)
from osgjs_export.models.scene import rotation_matrix, translation_matrix


class Billboard(Drawable):
    """A drawable the encoder does not know."""


def _quad_geometry(name: str = "quad", **kwargs) -> Geometry:
    return Geometry(
        name=name,
        vertices=AttributeArray([(0, 0, 0), (1, 0, 0), (1, 1, 0), (0, 1, 0)]),
        primitive_sets=[DrawArrays(PrimitiveMode.TRIANGLE_FAN, 0, 4)],
        **kwargs,
    )


def _root_child(document):
    """Return the body of the single node under the synthetic root container."""
    children = document["osg.Node"]["Children"]
    assert len(children) == 1
    return children[0]


# ---------------------------------------------------------------------------
# Document shell
# ---------------------------------------------------------------------------


class TestDocumentShell:
    def test_top_level_keys(self):
        document = encode(Group(name="root"), generator="unit-test")
        assert document.keys() == ["Version", "Generator", "osg.Node"]
        assert document["Version"] == 2
        assert document["Generator"] == "unit-test"

    def test_root_is_wrapped_in_container(self):
        document = encode(Group(name="root"))
        child = _root_child(document)
        assert child["osg.Node"]["Name"] == "root"

    def test_unnamed_node_has_no_name_key(self):
        document = encode(Group())
        assert "Name" not in _root_child(document)["osg.Node"]

    def test_empty_group_has_no_children(self):
        document = encode(Group(name="empty"))
        assert "Children" not in _root_child(document)["osg.Node"]

    def test_json_text(self):
        root = Group(name="root")
        root.add_child(Geode(name="geode", drawables=[_quad_geometry()]))
        text = writer.dumps(encode(root))
        data = json.loads(text)

        node = data["osg.Node"]["Children"][0]["osg.Node"]
        geode = node["Children"][0]["osg.Node"]
        geometry = geode["Children"][0]["osg.Geometry"]
        assert geometry["Name"] == "quad"
        assert geometry["PrimitiveSetList"] == [
            {"DrawArrays": {"First": 0, "Count": 4, "Mode": "TRIANGLE_FAN"}},
        ]
        vertex = geometry["VertexAttributeList"]["Vertex"]
        assert vertex["ItemSize"] == 3
        assert vertex["Array"]["Float32Array"]["Size"] == 4

    def test_visitor_is_reusable(self):
        visitor = WriteVisitor()
        first = writer.to_plain(visitor.encode(Group(name="a")))
        second = writer.to_plain(visitor.encode(Group(name="a")))
        # memo tables and UniqueIDs reset between encodes
        assert first == second


# ---------------------------------------------------------------------------
# Graph shape
# ---------------------------------------------------------------------------


def _tree(depth: int, branching: int) -> Group:
    node = Group(name=f"d{depth}")
    if depth:
        for _ in range(branching):
            node.add_child(_tree(depth - 1, branching))
    return node


def _shape(body) -> list:
    return [_shape(list(c.items())[0][1]) for c in body.get("Children", [])]


def _tree_shape(depth: int, branching: int) -> list:
    if not depth:
        return []
    return [_tree_shape(depth - 1, branching) for _ in range(branching)]


class TestGraphShape:
    def test_mirrors_depth_and_branching(self):
        document = encode(_tree(3, 2))
        body = _root_child(document)["osg.Node"]
        assert _shape(body) == _tree_shape(3, 2)

    def test_children_order_kept(self):
        root = Group()
        for name in ("a", "b", "c"):
            root.add_child(Group(name=name))
        body = _root_child(encode(root))["osg.Node"]
        assert [c["osg.Node"]["Name"].value for c in body["Children"]] == ["a", "b", "c"]

    def test_none_children_skipped(self):
        root = Group(children=[None, Group(name="x")])
        body = _root_child(encode(root))["osg.Node"]
        assert len(body["Children"]) == 1

    def test_wrapper_keys(self):
        root = Group()
        root.add_child(MatrixTransform(name="mt"))
        root.add_child(PositionAttitudeTransform(name="pat"))
        root.add_child(Projection(name="proj"))
        root.add_child(LightSource(name="light"))
        root.add_child(Geode(name="geode"))
        body = _root_child(encode(root))["osg.Node"]
        assert [c.keys()[0] for c in body["Children"]] == [
            "osg.MatrixTransform",
            "osg.MatrixTransform",
            "osg.Projection",
            "osg.LightSource",
            "osg.Node",
        ]

    def test_unsupported_drawable_skipped(self, caplog):
        geode = Geode(drawables=[Billboard(name="sprite"), _quad_geometry()])
        with caplog.at_level(logging.WARNING):
            body = _root_child(encode(geode))["osg.Node"]
        assert [c.keys() for c in body["Children"]] == [["osg.Geometry"]]
        assert "Billboard not supported" in caplog.text


class TestSharedSubgraphs:
    def test_shared_node_is_one_object(self):
        shared = Geode(name="shared", drawables=[_quad_geometry()])
        root = Group(children=[Group(name="a", children=[shared]), Group(name="b", children=[shared])])

        body = _root_child(encode(root))["osg.Node"]
        a, b = (c["osg.Node"] for c in body["Children"])
        assert a["Children"][0]["osg.Node"] is b["Children"][0]["osg.Node"]

    def test_shared_node_written_by_reference(self):
        shared = Group(name="shared")
        root = Group(children=[shared, shared])

        plain = writer.to_plain(encode(root))
        first, second = plain["osg.Node"]["Children"][0]["osg.Node"]["Children"]
        uid = first["osg.Node"]["UniqueID"]
        assert first["osg.Node"]["Name"] == "shared"
        assert second == {"osg.Node": {"UniqueID": uid}}

    def test_cycle_terminates(self):
        root = Group(name="loop")
        root.add_child(root)
        body = _root_child(encode(root))["osg.Node"]
        assert body["Children"][0]["osg.Node"] is body


# ---------------------------------------------------------------------------
# Transforms, lights, projections
# ---------------------------------------------------------------------------


class TestTransforms:
    def test_matrix_transform_flattened_row_major(self):
        matrix = translation_matrix((1.0, 2.0, 3.0))
        body = _root_child(encode(MatrixTransform(matrix=matrix)))["osg.MatrixTransform"]
        values = writer.to_plain(body["Matrix"])
        assert len(values) == 16
        assert values[12:15] == [1.0, 2.0, 3.0]

    def test_pat_matches_equivalent_matrix_transform(self):
        half = float(np.sqrt(0.5))
        attitude = (0.0, half, 0.0, half)
        pat = PositionAttitudeTransform(position=(4.0, 5.0, 6.0), attitude=attitude)
        mt = MatrixTransform(
            matrix=rotation_matrix(attitude) @ translation_matrix((4.0, 5.0, 6.0)),
        )

        pat_values = writer.to_plain(_root_child(encode(pat))["osg.MatrixTransform"]["Matrix"])
        mt_values = writer.to_plain(_root_child(encode(mt))["osg.MatrixTransform"]["Matrix"])
        assert pat_values[12:15] == [4.0, 5.0, 6.0]
        assert pat_values == pytest.approx(mt_values)

    def test_projection_matrix(self):
        matrix = np.identity(4)
        matrix[2, 3] = -1.0
        body = _root_child(encode(Projection(matrix=matrix)))["osg.Projection"]
        assert writer.to_plain(body["Matrix"])[11] == -1.0

    def test_light_source(self):
        node = LightSource(name="sun", light=Light(name="key", light_num=1))
        body = writer.to_plain(_root_child(encode(node))["osg.LightSource"])
        assert body["Name"] == "sun"
        assert body["Light"]["osg.Light"]["LightNum"] == 1
        assert body["Light"]["osg.Light"]["Name"] == "key"

    def test_light_source_without_light(self):
        body = _root_child(encode(LightSource()))["osg.LightSource"]
        assert "Light" not in body


# ---------------------------------------------------------------------------
# State and callbacks on nodes
# ---------------------------------------------------------------------------


class TestNodeState:
    def test_shared_state_set(self):
        state = StateSet(material=Material())
        root = Group(children=[Group(name="a", state_set=state), Group(name="b", state_set=state)])

        body = _root_child(encode(root))["osg.Node"]
        a, b = (c["osg.Node"] for c in body["Children"])
        assert a["StateSet"]["osg.StateSet"] is b["StateSet"]["osg.StateSet"]

        plain = writer.to_plain(body)
        second = plain["Children"][1]["osg.Node"]["StateSet"]["osg.StateSet"]
        assert list(second) == ["UniqueID"]

    def test_empty_state_set_omitted(self):
        body = _root_child(encode(Group(state_set=StateSet())))["osg.Node"]
        assert "StateSet" not in body

    def test_geometry_state_set(self):
        geometry = _quad_geometry(state_set=StateSet(transparent=True))
        body = _root_child(encode(Geode(drawables=[geometry])))["osg.Node"]
        json_geom = body["Children"][0]["osg.Geometry"]
        assert json_geom["StateSet"]["osg.StateSet"]["RenderingHint"] == "TRANSPARENT_BIN"

    def test_update_callbacks_first(self):
        animation = Animation("idle", [Channel("t", "root", keyframes=[(0.0, (0, 0, 0))])])
        node = Group(
            name="animated",
            state_set=StateSet(transparent=True),
            update_callbacks=[AnimationManager([animation])],
        )
        body = _root_child(encode(node))["osg.Node"]
        assert body.keys()[:3] == ["UpdateCallbacks", "StateSet", "Name"]

    def test_manager_without_animations_still_written(self):
        body = _root_child(encode(Group(update_callbacks=[AnimationManager()])))["osg.Node"]
        assert "UpdateCallbacks" in body

    def test_no_callbacks_no_key(self):
        body = _root_child(encode(Group()))["osg.Node"]
        assert "UpdateCallbacks" not in body


# ---------------------------------------------------------------------------
# Geometry
# ---------------------------------------------------------------------------


class TestGeometry:
    def test_attribute_order(self):
        geometry = _quad_geometry(
            normals=AttributeArray([(0, 0, 1)] * 4),
            colors=AttributeArray([(255, 255, 255, 255)] * 4, dtype=np.uint8),
            tex_coords={
                3: AttributeArray([(0, 0)] * 4),
                0: AttributeArray([(0, 0)] * 4),
            },
            tangents=AttributeArray([(1, 0, 0, 1)] * 4),
        )
        body = _root_child(encode(geometry))["osg.Geometry"]
        assert body["VertexAttributeList"].keys() == [
            "Vertex", "Normal", "Color", "TexCoord0", "TexCoord3", "Tangent",
        ]

    def test_attribute_count_mismatch(self):
        geometry = _quad_geometry(name="bad", normals=AttributeArray([(0, 0, 1)] * 3))
        root = Group(name="root", children=[Geode(name="geode", drawables=[geometry])])

        with pytest.raises(StructuralError, match="Normal 3 != 4") as excinfo:
            encode(root)
        assert excinfo.value.path == ("root", "geode", "bad")

    @pytest.mark.parametrize(
        "attributes, message",
        [
            ({"colors": AttributeArray([(1, 1, 1, 1)] * 3)}, "Color 3 != 4"),
            ({"tex_coords": {2: AttributeArray([(0, 0)] * 3)}}, "TexCoord2 3 != 4"),
            ({"tangents": AttributeArray([(1, 0, 0)] * 3)}, "Tangent 3 != 4"),
            ({"bitangents": AttributeArray([(0, 1, 0)] * 5)}, "Bitangent 5 != 4"),
        ],
    )
    def test_every_attribute_count_checked(self, attributes, message):
        with pytest.raises(StructuralError, match=message):
            encode(_quad_geometry(**attributes))

    def test_non_finite_values_encode(self):
        geometry = Geometry(vertices=AttributeArray([(float("nan"), 0.0, 0.0)]))
        body = _root_child(encode(geometry))["osg.Geometry"]
        assert "Vertex" in body["VertexAttributeList"]

    def test_mismatch_logged_critical(self, caplog):
        geometry = _quad_geometry(colors=AttributeArray([(1, 1, 1)]))
        with caplog.at_level(logging.CRITICAL), pytest.raises(StructuralError):
            encode(geometry)
        assert "Fatal nb Color 1 != 4" in caplog.text

    def test_no_primitive_sets_no_key(self):
        geometry = Geometry(vertices=AttributeArray([(0, 0, 0)]))
        body = _root_child(encode(geometry))["osg.Geometry"]
        assert "PrimitiveSetList" not in body
        assert "Vertex" in body["VertexAttributeList"]

    def test_no_vertices(self):
        body = _root_child(encode(Geometry()))["osg.Geometry"]
        assert len(body["VertexAttributeList"]) == 0

    def test_index_out_of_range(self):
        geometry = _quad_geometry()
        geometry.primitive_sets = [DrawElements(PrimitiveMode.TRIANGLES, [0, 1, 4])]
        with pytest.raises(StructuralError, match="out of range"):
            encode(geometry)

    def test_index_does_not_fit_type(self):
        vertices = AttributeArray(np.zeros((300, 3)))
        geometry = Geometry(
            vertices=vertices,
            primitive_sets=[DrawElements(PrimitiveMode.POINTS, [0, 299], IndexType.UBYTE)],
        )
        with pytest.raises(StructuralError, match="does not fit UBYTE"):
            encode(geometry)

    def test_draw_arrays_past_end(self):
        geometry = _quad_geometry()
        geometry.primitive_sets = [DrawArrays(PrimitiveMode.TRIANGLES, 3, 3)]
        with pytest.raises(StructuralError, match="past the last vertex"):
            encode(geometry)

    def test_quads_expanded(self):
        geometry = Geometry(
            vertices=AttributeArray(np.zeros((8, 3))),
            primitive_sets=[DrawArrays(PrimitiveMode.QUADS, 0, 8)],
        )
        body = writer.to_plain(_root_child(encode(geometry))["osg.Geometry"])
        draw = body["PrimitiveSetList"][0]["DrawElementsUShort"]
        assert draw["Mode"] == "TRIANGLES"
        assert draw["Indices"]["Array"]["Uint16Array"]["Size"] == 12
