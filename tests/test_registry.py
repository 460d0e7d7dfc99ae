"""Tests for the annotation registry."""

import os
import pathlib
import shutil
import tempfile
import unittest
from unittest.mock import patch

from adocmedia.engine.cache import RemoteAssetCache
from adocmedia.engine.domain import Document, Span
from adocmedia.engine.options import DisplayConfig
from adocmedia.engine.registry import AnnotationRegistry, local_candidate
from adocmedia.engine.surface import RecordingSurface
from adocmedia.exceptions import (
    AnnotationNotFound,
    DisplayUnsupported,
    FetchError,
    RegistryClosed,
)

REMOTE_URL = "https://example.com/c.png"

DOC_TEXT = """= Sample
:imgs: pics

image::a.png[A]

Some image:{imgs}/b.png[B] inline.
image:missing.png[]
image:https://example.com/c.png[C]
"""


class CountingTransport:
    def __init__(self, failures=0):
        self.failures = failures
        self.calls = []

    def download(self, url, path):
        self.calls.append(url)
        if self.failures:
            self.failures -= 1
            raise FetchError("unreachable", url=url)
        with open(path, "wb") as f:
            f.write(b"remote")


class MinimalSurface:
    """Surface with only the required create/destroy methods."""

    def __init__(self):
        self.payloads = {}
        self._next = 0

    def create(self, begin, end, payload):
        self._next += 1
        self.payloads[self._next] = payload
        return self._next

    def destroy(self, handle):
        del self.payloads[handle]


def _write(path, data=b"png"):
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, "wb") as f:
        f.write(data)


class RegistryTestCase(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.mkdtemp()
        _write(os.path.join(self.tmp, "a.png"))
        _write(os.path.join(self.tmp, "pics", "b.png"))
        self.document = Document(DOC_TEXT, path=os.path.join(self.tmp, "doc.adoc"))
        self.transport = CountingTransport()
        self.cache = RemoteAssetCache(
            self.transport, directory=os.path.join(self.tmp, "cache")
        )
        self.surface = RecordingSurface()

    def tearDown(self):
        shutil.rmtree(self.tmp, ignore_errors=True)

    def make_registry(self, config=None, surface=None, hooks=()):
        return AnnotationRegistry(
            surface or self.surface, cache=self.cache, config=config, hooks=hooks
        )

    def offset_of(self, needle):
        return DOC_TEXT.index(needle)

    def snapshot(self, annotations):
        return [(a.span, a.path) for a in annotations]


class DisplayAllTest(RegistryTestCase):
    def test_displays_local_references_in_order(self):
        registry = self.make_registry()
        created = registry.display_all(self.document)

        self.assertEqual(
            [a.path for a in created],
            [
                os.path.join(self.tmp, "a.png"),
                os.path.join(self.tmp, "pics", "b.png"),
            ],
        )
        self.assertEqual(created[0].span.begin, self.offset_of("image::a.png"))
        self.assertEqual(len(self.surface.live), 2)
        self.assertEqual(self.transport.calls, [])
        self.assertIsNone(created[0].source_url)

    def test_remote_reference_fetched_when_enabled(self):
        registry = self.make_registry(DisplayConfig(display_remote_images=True))
        created = registry.display_all(self.document)

        self.assertEqual(len(created), 3)
        self.assertEqual(self.transport.calls, [REMOTE_URL])
        remote = created[-1]
        self.assertEqual(remote.source_url, REMOTE_URL)
        self.assertEqual(remote.path, self.cache.lookup(REMOTE_URL))

    def test_redisplay_uses_cache(self):
        registry = self.make_registry(DisplayConfig(display_remote_images=True))
        registry.display_all(self.document)
        registry.display_all(self.document)
        self.assertEqual(self.transport.calls, [REMOTE_URL])
        self.assertEqual(len(registry), 3)

    def test_fetch_failure_skips_reference_and_retries_later(self):
        self.transport.failures = 1
        registry = self.make_registry(DisplayConfig(display_remote_images=True))

        self.assertEqual(len(registry.display_all(self.document)), 2)
        self.assertEqual(len(registry.display_all(self.document)), 3)
        self.assertEqual(self.transport.calls, [REMOTE_URL, REMOTE_URL])

    def test_unsupported_surface_aborts_before_mutation(self):
        registry = self.make_registry()
        registry.display_all(self.document)
        self.surface.can_display_images = False

        with self.assertRaises(DisplayUnsupported):
            registry.display_all(self.document)
        self.assertEqual(len(registry), 2)
        self.assertEqual(len(self.surface.live), 2)

    def test_redisplay_re_resolves_locator(self):
        registry = self.make_registry()
        registry.display_all(self.document)
        registry.remove_all()

        _write(os.path.join(self.tmp, "other", "b.png"))
        changed = Document(
            DOC_TEXT.replace(":imgs: pics", ":imgs: other"), path=self.document.path
        )
        created = registry.display_all(changed)
        self.assertEqual(created[1].path, os.path.join(self.tmp, "other", "b.png"))

    def test_hooks_receive_new_annotations(self):
        seen = []
        registry = self.make_registry(hooks=[seen.append])
        late = []
        registry.add_hook(late.append)

        created = registry.display_all(self.document)
        self.assertEqual(seen, created)
        self.assertEqual(late, created)

    def test_max_size_passed_when_supported(self):
        config = DisplayConfig(max_image_size=(100, 80))
        self.make_registry(config).display_all(self.document)
        self.assertEqual(
            [payload.max_size for _, payload in self.surface.live], [(100, 80)] * 2
        )

    def test_max_size_dropped_when_unsupported(self):
        surface = MinimalSurface()
        config = DisplayConfig(max_image_size=(100, 80))
        self.make_registry(config, surface=surface).display_all(self.document)
        self.assertEqual(len(surface.payloads), 2)
        for payload in surface.payloads.values():
            self.assertIsNone(payload.max_size)


class RemotePolicyTest(RegistryTestCase):
    """Network access requires a missing local file, the flag and the scheme."""

    def display(self, locator, config):
        text = f"image:{locator}[]"
        document = Document(text, path=os.path.join(self.tmp, "doc.adoc"))
        return self.make_registry(config).display_all(document)

    def test_all_conditions_met(self):
        created = self.display(REMOTE_URL, DisplayConfig(display_remote_images=True))
        self.assertEqual(len(created), 1)
        self.assertEqual(self.transport.calls, [REMOTE_URL])

    def test_remote_display_disabled(self):
        self.assertEqual(self.display(REMOTE_URL, DisplayConfig()), [])
        self.assertEqual(self.transport.calls, [])

    def test_scheme_not_allowed(self):
        config = DisplayConfig(
            display_remote_images=True, remote_image_protocols=frozenset({"https"})
        )
        self.assertEqual(self.display("http://example.com/c.png", config), [])
        self.assertEqual(self.transport.calls, [])

    def test_existing_local_file(self):
        local_url = pathlib.Path(os.path.join(self.tmp, "a.png")).as_uri()
        config = DisplayConfig(
            display_remote_images=True, remote_image_protocols=frozenset({"file"})
        )
        created = self.display(local_url, config)
        self.assertEqual(len(created), 1)
        self.assertEqual(created[0].path, os.path.join(self.tmp, "a.png"))
        self.assertIsNone(created[0].source_url)
        self.assertEqual(self.transport.calls, [])


class RemovalTest(RegistryTestCase):
    def setUp(self):
        super().setUp()
        self.registry = self.make_registry()
        self.created = self.registry.display_all(self.document)

    def test_remove_all(self):
        self.assertTrue(self.registry.remove_all())
        self.assertEqual(len(self.registry), 0)
        self.assertEqual(self.surface.live, [])
        self.assertFalse(self.registry.remove_all())

    def test_remove_all_on_empty_registry(self):
        registry = self.make_registry(surface=RecordingSurface())
        self.assertFalse(registry.remove_all())

    def test_annotation_at(self):
        first = self.created[0]
        self.assertIs(self.registry.annotation_at(first.span.begin), first)
        self.assertIs(self.registry.annotation_at(first.span.end - 1), first)
        self.assertIsNone(self.registry.annotation_at(first.span.end))
        self.assertIsNone(self.registry.annotation_at(0))

    def test_list_in(self):
        first, second = self.created
        self.assertEqual(self.registry.list_in(0, len(DOC_TEXT)), self.created)
        self.assertEqual(self.registry.list_in(0, first.span.begin), [])
        self.assertEqual(
            self.registry.list_in(first.span.end - 1, second.span.begin + 1),
            [first, second],
        )

    def test_remove_at_with_flush(self):
        first = self.created[0]
        self.assertTrue(self.registry.remove_at(first.span.begin + 2, flush=True))
        self.assertEqual(self.surface.flushed[0].path, first.path)
        self.assertEqual(self.registry.annotations, [self.created[1]])
        self.assertFalse(self.registry.remove_at(first.span.begin))

    def test_remove_at_without_flush(self):
        self.registry.remove_at(self.created[1].span.begin)
        self.assertEqual(self.surface.flushed, [])
        self.assertEqual(len(self.surface.live), 1)

    def test_flush_ignored_by_surface_without_support(self):
        surface = MinimalSurface()
        registry = self.make_registry(surface=surface)
        first = registry.display_all(self.document)[0]
        self.assertTrue(registry.remove_at(first.span.begin, flush=True))
        self.assertEqual(len(surface.payloads), 1)

    def test_annotation_follows_surface_range(self):
        first = self.created[0]
        self.surface.move(first.handle, 500, 510)
        self.assertIs(self.registry.annotation_at(505), first)
        self.assertIsNone(self.registry.annotation_at(first.span.begin))


class ToggleTest(RegistryTestCase):
    def test_toggle_round_trip_restores_annotation_set(self):
        expected = self.snapshot(
            self.make_registry(surface=RecordingSurface()).display_all(self.document)
        )
        registry = self.make_registry()

        self.assertTrue(registry.toggle(self.document))
        self.assertEqual(self.snapshot(registry.annotations), expected)
        self.assertFalse(registry.toggle(self.document))
        self.assertEqual(len(registry), 0)
        self.assertTrue(registry.toggle(self.document))
        self.assertEqual(self.snapshot(registry.annotations), expected)

    def test_toggle_on_empty_registry_displays(self):
        registry = self.make_registry()
        with patch.object(
            registry, "display_all", wraps=registry.display_all
        ) as display_all:
            registry.toggle(self.document)
        display_all.assert_called_once_with(self.document)

    def test_toggle_with_annotations_only_removes(self):
        registry = self.make_registry()
        registry.display_all(self.document)
        with patch.object(registry, "display_all") as display_all:
            self.assertFalse(registry.toggle(self.document))
        display_all.assert_not_called()


class PointOperationsTest(RegistryTestCase):
    def test_display_at_single_reference(self):
        registry = self.make_registry()
        offset = self.offset_of("image:{imgs}")
        ann = registry.display_at(self.document, offset + 3)
        self.assertEqual(ann.path, os.path.join(self.tmp, "pics", "b.png"))
        self.assertEqual(registry.annotations, [ann])

    def test_display_at_replaces_existing(self):
        registry = self.make_registry()
        registry.display_all(self.document)
        offset = self.offset_of("image::a.png")
        ann = registry.display_at(self.document, offset)
        self.assertEqual(len(registry), 2)
        self.assertIn(ann, registry.annotations)
        self.assertEqual(len(self.surface.destroyed), 1)

    def test_display_at_without_reference(self):
        registry = self.make_registry()
        self.assertIsNone(registry.display_at(self.document, 2))

    def test_display_at_unsupported_surface(self):
        surface = RecordingSurface(can_display_images=False)
        registry = self.make_registry(surface=surface)
        with self.assertRaises(DisplayUnsupported):
            registry.display_at(self.document, self.offset_of("image::a.png"))

    def test_refresh_at_flushes_and_recreates(self):
        registry = self.make_registry()
        first = registry.display_all(self.document)[0]
        refreshed = registry.refresh_at(self.document, first.span.begin + 4)

        self.assertIsNot(refreshed, first)
        self.assertEqual(refreshed.span, first.span)
        self.assertEqual(self.surface.flushed[0].path, first.path)
        self.assertEqual(len(registry), 2)

    def test_save_at_into_directory(self):
        registry = self.make_registry()
        first = registry.display_all(self.document)[0]
        dest = os.path.join(self.tmp, "saved")
        os.makedirs(dest)

        target = registry.save_at(first.span.begin, dest)
        self.assertEqual(target, os.path.join(dest, "a.png"))
        with open(target, "rb") as f:
            self.assertEqual(f.read(), b"png")

    def test_save_at_remote_uses_url_name(self):
        registry = self.make_registry(DisplayConfig(display_remote_images=True))
        remote = registry.display_all(self.document)[-1]
        target = registry.save_at(remote.span.begin, self.tmp)
        self.assertEqual(target, os.path.join(self.tmp, "c.png"))

    def test_save_at_without_annotation(self):
        registry = self.make_registry()
        with self.assertRaises(AnnotationNotFound):
            registry.save_at(0, self.tmp)


class LifecycleTest(RegistryTestCase):
    def test_close_clears_and_blocks_display(self):
        registry = self.make_registry()
        registry.display_all(self.document)
        registry.close()

        self.assertEqual(len(registry), 0)
        self.assertEqual(self.surface.live, [])
        with self.assertRaises(RegistryClosed):
            registry.display_all(self.document)
        registry.close()


class LocalCandidateTest(unittest.TestCase):
    def test_relative_path_joined_to_directory(self):
        self.assertEqual(
            local_candidate("./img/../a.png", "/docs"), os.path.normpath("/docs/a.png")
        )

    def test_absolute_path_kept(self):
        self.assertEqual(local_candidate("/abs/a.png", "/docs"), "/abs/a.png")

    def test_file_url(self):
        self.assertEqual(local_candidate("file:///abs/a.png", "/docs"), "/abs/a.png")


class DocumentTest(unittest.TestCase):
    def test_directory_of_unsaved_document_is_cwd(self):
        self.assertEqual(Document("text").directory, os.getcwd())

    def test_span_helpers(self):
        span = Span(2, 5)
        self.assertEqual(len(span), 3)
        self.assertTrue(span.contains(4))
        self.assertFalse(span.contains(5))
        self.assertTrue(span.intersects(4, 9))
        self.assertFalse(span.intersects(5, 9))


if __name__ == "__main__":
    unittest.main()
