import time
from pydogstatsd import batched, OK
from pydogstatsd.log import logger

logger.add("stdout", level="WARNING")

with batched(max=20) as statsd:
    for i in range(100):
        with statsd.timer("example.loop", tags={"env": "dev"}):
            time.sleep(0.001)
        statsd.increment(["example.count", "example.total"])
    statsd.service_check("example.done", OK, message="finished\nm:100 loops")
