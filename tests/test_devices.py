import pytest

from pixelsio.config import ConfigFactory, InvalidArgumentError
from pixelsio.devices import StorageArrayScheduler

FILES = ["/ssd1/t_0.pxl", "/ssd2/t_1.pxl", "/ssd1/t_2.pxl", "/ssd2/t_3.pxl", "/ssd1/t_4.pxl"]


def test_files_grouped_by_device():
    scheduler = StorageArrayScheduler(FILES, 2, 1)
    assert scheduler.device_sum() == 2
    assert scheduler.file_sum(0) == 3
    assert scheduler.file_sum(1) == 2
    assert [scheduler.file_name(0, i) for i in range(3)] == [
        "/ssd1/t_0.pxl", "/ssd1/t_2.pxl", "/ssd1/t_4.pxl"]
    assert scheduler.file_name(1, 1) == "/ssd2/t_3.pxl"
    assert scheduler.max_file_sum() == 3


def test_every_file_lands_once():
    scheduler = StorageArrayScheduler(FILES, 2, 1)
    placed = [scheduler.file_name(d, f)
              for d in range(scheduler.device_sum())
              for f in range(scheduler.file_sum(d))]
    assert sorted(placed) == sorted(FILES)


def test_batch_ids_are_consecutive():
    scheduler = StorageArrayScheduler(FILES, 2, 1)
    ids = [scheduler.batch_id(d, f)
           for d in range(scheduler.device_sum())
           for f in range(scheduler.file_sum(d))]
    assert ids == list(range(len(FILES)))


def test_devices_share_threads():
    scheduler = StorageArrayScheduler(FILES, 1, 1)
    assert scheduler.device_sum() == 1
    assert scheduler.file_sum(0) == len(FILES)


def test_acquire_device_id_round_robin():
    scheduler = StorageArrayScheduler(FILES, 2, 1)
    assert [scheduler.acquire_device_id() for _ in range(4)] == [0, 1, 0, 1]


def test_missing_directory_level():
    with pytest.raises(InvalidArgumentError):
        StorageArrayScheduler(["/flatfile"], 1, 1)


def test_unbalanced_threads_rejected():
    files = ["/a/x0", "/b/x1", "/a/x2", "/b/x3"]
    with pytest.raises(InvalidArgumentError):
        StorageArrayScheduler(files, 3, 1)


def test_invalid_thread_count():
    with pytest.raises(ValueError):
        StorageArrayScheduler(FILES, 0, 1)


def test_depth_from_configuration():
    ConfigFactory.set_instance(ConfigFactory({"storage.directory.depth": "1"}))
    try:
        scheduler = StorageArrayScheduler(FILES, 2)
        assert scheduler.device_sum() == 2
        assert scheduler.file_sum(1) == 2
    finally:
        ConfigFactory.set_instance(None)