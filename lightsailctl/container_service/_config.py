DEFAULT_PLATFORM = "linux/amd64"

# Lightsail keeps pushed images in the "sr" repository of the service
# registry, which retains only tags that get registered right after push.
STAGING_REPOSITORY_SUFFIX = "/sr"

CLEANUP_GRACE_SECONDS = 10.0
