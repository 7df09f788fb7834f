import os

import awskit

# awskit version
VERSION = awskit.__version__

# default encoding used when converting between str and bytes
DEFAULT_ENCODING = "utf-8"

TRUE_STRINGS = ("1", "true", "True")
FALSE_STRINGS = ("0", "false", "False")

# log levels accepted in AWSKIT_LOG
LOG_LEVELS = ("trace", "debug", "info", "warn", "error", "warning")
AWSKIT_LOG_TRACE = "trace"
TRACE_LOG_LEVELS = [AWSKIT_LOG_TRACE]

# region used when neither the configuration nor the environment provides one
DEFAULT_REGION = "us-east-1"

# default HTTP timeout (seconds) for requests sent by generated clients
DEFAULT_HTTP_TIMEOUT = 60

# default number of retries for throttled or failed (5xx) requests
DEFAULT_MAX_RETRIES = 3

# error codes of throttled requests, retried like the throttling status codes even though they come with a 400
THROTTLING_ERROR_CODES = (
    "Throttling",
    "ThrottlingException",
    "ThrottledException",
    "RequestThrottledException",
    "TooManyRequestsException",
    "ProvisionedThroughputExceededException",
    "TransactionInProgressException",
    "RequestLimitExceeded",
    "BandwidthLimitExceeded",
    "LimitExceededException",
    "RequestThrottled",
    "SlowDown",
    "PriorRequestNotComplete",
    "EC2ThrottledException",
)

# default size of the thread pool that sends requests in the background
DEFAULT_MAX_WORKERS = 10

# HTTP header carrying the error type in JSON protocol error responses
HEADER_AMZN_ERROR_TYPE = "X-Amzn-Errortype"

# HTTP header carrying the request id
HEADER_AMZN_REQUEST_ID = "X-Amzn-Requestid"

# user agent sent by generated clients
USER_AGENT = f"awskit/{VERSION}"

# root folder of the awskit package
AWSKIT_ROOT_FOLDER = os.path.realpath(os.path.join(os.path.dirname(os.path.realpath(__file__))))

# file (next to generated service packages) which records the generated services and operations
MANIFEST_FILE_NAME = "manifest.json"
