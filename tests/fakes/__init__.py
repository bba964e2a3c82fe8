from tests.fakes.fake_graph import FakePreviewResolver, FakeSearchProvider
from tests.fakes.fake_templates import FakeTemplateCatalog

__all__ = ["FakePreviewResolver", "FakeSearchProvider", "FakeTemplateCatalog"]
