# universe_generator/worker.py

"""
================================================================================
CHUNK WORKER
================================================================================
Runs chunk generation off the caller's thread. The caller sends request
messages and receives self-describing responses asynchronously, in whatever
order the workers finish.

Message protocol:
    caller -> worker: {'type': 'generate_chunk', chunk_x, chunk_y, chunk_size,
                       rule, seed, [moisture_rule]}
    worker -> caller: {'type': 'chunk_ready', chunk_x, chunk_y, edge_length,
                       elevation, moisture, biome_ids, generation_time_ms}
    caller -> worker: {'type': 'ping'}
    worker -> caller: {'type': 'pong'}

Every request is pure and self-contained, so no locks are needed and a stale
response can simply be ignored by the caller.

THIS FILE MUST NOT IMPORT ANY RENDERING LIBRARY.
================================================================================
"""

import logging
import multiprocessing
import os

from .generator import ChunkGenerator

MESSAGE_GENERATE_CHUNK = 'generate_chunk'
MESSAGE_CHUNK_READY = 'chunk_ready'
MESSAGE_PING = 'ping'
MESSAGE_PONG = 'pong'

# --- Per-process state, populated by the pool initializer ---
worker_generator = None


def init_worker(config: dict):
    """Initializes the generator for each worker process."""
    global worker_generator
    worker_logger = logging.getLogger(f"Worker-{os.getpid()}")
    worker_generator = ChunkGenerator(config=config, logger=worker_logger)


def _get_generator() -> ChunkGenerator:
    # Direct in-process calls (no pool initializer) fall back to defaults.
    if worker_generator is None:
        init_worker({})
    return worker_generator


def handle_message(message: dict) -> dict:
    """
    A top-level, pickle-able function designed to be run in a worker process.
    It answers one request message and returns the response message.
    """
    message_type = message.get('type')

    if message_type == MESSAGE_PING:
        return {'type': MESSAGE_PONG}

    if message_type == MESSAGE_GENERATE_CHUNK:
        result = _get_generator().generate_from_request(message)
        return {'type': MESSAGE_CHUNK_READY, **result}

    raise ValueError(f"Unknown worker message type: {message_type!r}")


def make_chunk_request(chunk_x: int, chunk_y: int, chunk_size: int, rule: int, seed: int, moisture_rule: int = None) -> dict:
    """Builds a request message in the worker protocol."""
    request = {
        'type': MESSAGE_GENERATE_CHUNK,
        'chunk_x': chunk_x,
        'chunk_y': chunk_y,
        'chunk_size': chunk_size,
        'rule': rule,
        'seed': seed,
    }
    if moisture_rule is not None:
        request['moisture_rule'] = moisture_rule
    return request


class ChunkWorkerPool:
    """
    A pool of worker processes that generate chunks concurrently.

    Usage:
        with ChunkWorkerPool(config, logger) as pool:
            pending = pool.submit(make_chunk_request(0, 0, 32, 30, 42))
            for response in pool.generate(requests):
                ...
    """
    def __init__(self, config: dict, logger: logging.Logger, processes: int = None):
        self.config = config
        self.logger = logger
        self.processes = processes or max(1, multiprocessing.cpu_count() - 1)
        self._pool = None

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()
        return False

    def start(self):
        if self._pool is not None:
            return
        self.logger.info(f"Starting chunk worker pool with {self.processes} processes.")
        self._pool = multiprocessing.Pool(
            processes=self.processes,
            initializer=init_worker,
            initargs=(self.config,),
        )

    def close(self):
        if self._pool is None:
            return
        self._pool.close()
        self._pool.join()
        self._pool = None
        self.logger.info("Chunk worker pool stopped.")

    def _require_pool(self):
        if self._pool is None:
            raise RuntimeError("ChunkWorkerPool is not running; call start() or use it as a context manager.")
        return self._pool

    def submit(self, request: dict, callback=None, error_callback=None):
        """
        Queues one request without blocking. Returns a
        `multiprocessing.pool.AsyncResult`; `callback` receives the response.
        """
        message = dict(request, type=MESSAGE_GENERATE_CHUNK)
        return self._require_pool().apply_async(
            handle_message, (message,),
            callback=callback, error_callback=error_callback,
        )

    def ping(self, timeout: float = None) -> dict:
        return self._require_pool().apply_async(handle_message, ({'type': MESSAGE_PING},)).get(timeout)

    def generate(self, requests):
        """Yields responses in completion order, not request order."""
        messages = [dict(request, type=MESSAGE_GENERATE_CHUNK) for request in requests]
        self.logger.debug(f"Dispatching {len(messages)} chunk requests.")
        yield from self._require_pool().imap_unordered(handle_message, messages)
