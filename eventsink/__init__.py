"""eventsink package

Archives security-event records to OCI Object Storage. Subpackages keep the
storage SDK, the metric sinks and the HTTP/CLI surfaces apart so each can be
tested with simple fakes.
"""
