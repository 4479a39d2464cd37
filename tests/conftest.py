import pytest

from literary_db.kv_store import InMemoryKeyValueStore, KeyValueStoreConfig, LocalFSKeyValueStore
from literary_graphs.model import Edge, Node, NodeMetadata


def make_node(nid, ntype="book", depth=0, **meta):
    return Node(id=nid, type=ntype, label=nid.title(), depth=depth, metadata=NodeMetadata(**meta))


@pytest.fixture
def abc_graph():
    """Book A linked to author B and theme C."""
    nodes = [
        make_node("a", "book", 0),
        make_node("b", "author", 1),
        make_node("c", "theme", 1),
    ]
    edges = [
        Edge("e1", "a", "b", "wrote", 0.8),
        Edge("e2", "a", "c", "features", 0.4),
    ]
    return nodes, edges


@pytest.fixture
def library():
    """A small literary neighbourhood with years, series and descriptions."""
    nodes = [
        make_node("tolkien", "author", 0, description="Philologist and author"),
        make_node("hobbit", "book", 1, year=1937, description="A hobbit goes on an adventure",
                  image_url="http://img/hobbit.jpg"),
        make_node("fellowship", "book", 1, year=1954, series="The Lord of the Rings",
                  description="The ring sets out"),
        make_node("towers", "book", 1, year=1954, series="The Lord of the Rings"),
        make_node("silmarillion", "book", 2, year=1977),
        make_node("quest", "theme", 2),
        make_node("fantasy", "genre", 1),
        make_node("lewis", "author", 2),
        make_node("narnia", "book", 3, year=1950, series="Narnia", description="Wardrobe ADVENTURE"),
    ]
    edges = [
        Edge("w1", "tolkien", "hobbit", "wrote", 1.0),
        Edge("w2", "tolkien", "fellowship", "wrote", 1.0),
        Edge("w3", "tolkien", "towers", "wrote", 1.0),
        Edge("w4", "tolkien", "silmarillion", "wrote", 1.0),
        Edge("t1", "hobbit", "quest", "features", 0.6),
        Edge("t2", "fellowship", "quest", "features", 0.6),
        Edge("g1", "hobbit", "fantasy", "belongs_to", 0.3),
        Edge("i1", "tolkien", "lewis", "influenced", 0.5),
        Edge("w5", "lewis", "narnia", "wrote", 1.0),
    ]
    return nodes, edges


@pytest.fixture
def memory_store():
    return InMemoryKeyValueStore()


@pytest.fixture
def fs_store(tmp_path):
    return LocalFSKeyValueStore(KeyValueStoreConfig(base_path=str(tmp_path / "store")))
