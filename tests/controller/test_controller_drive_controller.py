import json
import unittest
from unittest.mock import Mock, patch

from googleapiclient.errors import HttpError

from gdrivewatch.controller.drive_controller import (
    GoogleDriveController,
    RetryPolicy,
    _http_error_to_info,
)
from gdrivewatch.errors import (
    DetailFetchFailure,
    FatalSourceError,
    NetworkError,
    NotFoundError,
    PermissionError,
    RateLimitError,
)


def _http_error(status: int, reason: str, error_reason: str | None = None) -> HttpError:
    resp = Mock()
    resp.status = status
    resp.reason = reason
    content = b"{}"
    if error_reason is not None:
        err_body = {
            "error": {
                "message": reason,
                "errors": [{"domain": "usageLimits", "reason": error_reason}],
            }
        }
        content = json.dumps(err_body).encode("utf-8")
    return HttpError(resp=resp, content=content)


class TestDriveControllerHelpers(unittest.TestCase):
    def test_http_error_to_info_prefers_error_reason(self) -> None:
        info = _http_error_to_info(_http_error(403, "Forbidden", "userRateLimitExceeded"))
        self.assertEqual(info.status_code, 403)
        self.assertEqual(info.reason, "userRateLimitExceeded")
        self.assertEqual(info.message, "Forbidden")
        self.assertEqual(info.details["domain"], "usageLimits")

    def test_http_error_to_info_without_body(self) -> None:
        info = _http_error_to_info(_http_error(404, "Not Found"))
        self.assertEqual(info.reason, "Not Found")
        self.assertIsNone(info.message)
        self.assertIsNone(info.details)


class TestDriveControllerMocked(unittest.TestCase):
    def _mock_service_with_pages(self, *pages):
        service = Mock()
        files_resource = Mock()
        request = Mock()

        service.files.return_value = files_resource
        request.execute.side_effect = list(pages)
        files_resource.list.return_value = request
        return service, files_resource, request

    def _mock_service_with_get(self):
        service = Mock()
        files_resource = Mock()
        req = Mock()

        service.files.return_value = files_resource
        files_resource.get.return_value = req
        return service, files_resource, req

    def test_list_children_includes_supports_all_drives_kwargs(self) -> None:
        service, files_resource, _ = self._mock_service_with_pages({"files": []})
        controller = GoogleDriveController.from_service(service, supports_all_drives=True)

        controller.list_children("P1")

        kwargs = files_resource.list.call_args.kwargs
        self.assertTrue(kwargs.get("supportsAllDrives"))
        self.assertTrue(kwargs.get("includeItemsFromAllDrives"))
        self.assertIn("'P1' in parents", kwargs["q"])
        self.assertIn("trashed = false", kwargs["q"])

    def test_list_children_without_all_drives(self) -> None:
        service, files_resource, _ = self._mock_service_with_pages({"files": []})
        controller = GoogleDriveController.from_service(service, supports_all_drives=False)

        controller.list_children("P1")

        kwargs = files_resource.list.call_args.kwargs
        self.assertNotIn("supportsAllDrives", kwargs)

    def test_list_children_follows_page_tokens(self) -> None:
        service, files_resource, request = self._mock_service_with_pages(
            {"files": [{"id": "a"}, {"id": "b"}], "nextPageToken": "t2"},
            {"files": [{"id": "c"}]},
        )
        controller = GoogleDriveController.from_service(service)

        children = controller.list_children("P1")

        self.assertEqual([c["id"] for c in children], ["a", "b", "c"])
        self.assertEqual(request.execute.call_count, 2)
        tokens = [call.kwargs["pageToken"] for call in files_resource.list.call_args_list]
        self.assertEqual(tokens, [None, "t2"])

    def test_get_maps_http_404_to_not_found(self) -> None:
        service, _, req = self._mock_service_with_get()
        req.execute.side_effect = _http_error(404, "Not Found")

        controller = GoogleDriveController.from_service(service)

        with self.assertRaises(NotFoundError) as ctx:
            controller.get("X")
        self.assertIsInstance(ctx.exception.cause, HttpError)

    def test_retry_on_429(self) -> None:
        service, _, req = self._mock_service_with_get()
        http_err = _http_error(429, "rate limited", "rateLimitExceeded")

        # Fail twice, then succeed.
        req.execute.side_effect = [
            http_err,
            http_err,
            {"id": "F1", "name": "n", "mimeType": "text/plain", "parents": []},
        ]

        controller = GoogleDriveController.from_service(service)

        with patch("time.sleep", return_value=None) as sleep:
            data = controller.get("F1")

        self.assertEqual(data["id"], "F1")
        self.assertEqual(req.execute.call_count, 3)
        self.assertEqual([c.args[0] for c in sleep.call_args_list], [1.0, 2.0])

    def test_retries_exhausted_raise_rate_limit_error(self) -> None:
        service, _, req = self._mock_service_with_get()
        req.execute.side_effect = _http_error(429, "rate limited", "rateLimitExceeded")

        controller = GoogleDriveController.from_service(
            service, retry_policy=RetryPolicy(max_retries=2, initial_delay_sec=0.5)
        )

        with patch("time.sleep", return_value=None):
            with self.assertRaises(RateLimitError):
                controller.get("X")
        self.assertEqual(req.execute.call_count, 3)

    def test_fatal_errors_are_not_retried(self) -> None:
        service, _, req = self._mock_service_with_get()
        req.execute.side_effect = _http_error(403, "Forbidden", "insufficientPermissions")

        controller = GoogleDriveController.from_service(service)

        with patch("time.sleep", return_value=None) as sleep:
            with self.assertRaises(PermissionError):
                controller.get("X")
        sleep.assert_not_called()
        self.assertEqual(req.execute.call_count, 1)

    def test_network_errors_are_transient(self) -> None:
        service, _, req = self._mock_service_with_get()
        req.execute.side_effect = ConnectionResetError("reset")

        controller = GoogleDriveController.from_service(
            service, retry_policy=RetryPolicy(max_retries=1)
        )

        with patch("time.sleep", return_value=None):
            with self.assertRaises(NetworkError):
                controller.get("X")
        self.assertEqual(req.execute.call_count, 2)

    def test_unknown_errors_are_fatal(self) -> None:
        service, _, req = self._mock_service_with_get()
        req.execute.side_effect = KeyError("boom")

        controller = GoogleDriveController.from_service(service)

        with self.assertRaises(FatalSourceError):
            controller.get("X")
        self.assertEqual(req.execute.call_count, 1)

    def test_get_parent_name(self) -> None:
        service, files_resource, req = self._mock_service_with_get()
        req.execute.side_effect = [{"parents": ["P1"]}, {"name": "Projects"}]

        controller = GoogleDriveController.from_service(service)

        self.assertEqual(controller.get_parent_name("F1"), "Projects")
        self.assertEqual(files_resource.get.call_args_list[1].kwargs["fileId"], "P1")

    def test_get_parent_name_root_and_unknown(self) -> None:
        service, _, req = self._mock_service_with_get()
        controller = GoogleDriveController.from_service(service)

        req.execute.side_effect = [{"parents": []}]
        self.assertEqual(controller.get_parent_name("F1"), "root")

        req.execute.side_effect = _http_error(404, "Not Found")
        with self.assertLogs("gdrivewatch.controller.drive_controller", level="WARNING"):
            self.assertEqual(controller.get_parent_name("F1"), "unknown")

    def test_get_revision_info_collects_all_pages(self) -> None:
        service = Mock()
        revisions_resource = Mock()
        req = Mock()
        service.revisions.return_value = revisions_resource
        revisions_resource.list.return_value = req
        req.execute.side_effect = [
            {"revisions": [{"id": "1"}, {"id": "2"}], "nextPageToken": "n"},
            {"revisions": [{"id": "3", "modifiedTime": "T3"}]},
        ]

        controller = GoogleDriveController.from_service(service)
        info = controller.get_revision_info("DOC")

        self.assertEqual(info.revision_count, 3)
        self.assertEqual(info.last_revision, {"id": "3", "modifiedTime": "T3"})
        self.assertEqual(revisions_resource.list.call_args.kwargs["fileId"], "DOC")

    def test_get_revision_info_failure(self) -> None:
        service = Mock()
        req = Mock()
        service.revisions.return_value.list.return_value = req
        req.execute.side_effect = _http_error(403, "Forbidden", "insufficientPermissions")

        controller = GoogleDriveController.from_service(service)

        with self.assertRaises(DetailFetchFailure) as ctx:
            controller.get_revision_info("DOC")
        self.assertEqual(ctx.exception.details["file_id"], "DOC")
        self.assertIsInstance(ctx.exception.cause, PermissionError)

    def test_no_revisions(self) -> None:
        service = Mock()
        service.revisions.return_value.list.return_value.execute.return_value = {}

        info = GoogleDriveController.from_service(service).get_revision_info("DOC")

        self.assertEqual(info.revision_count, 0)
        self.assertIsNone(info.last_revision)


if __name__ == "__main__":
    unittest.main()
