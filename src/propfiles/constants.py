"""Application-wide constants."""

from propfiles.models import LogicalPath

APP_NAME = "propfiles"

# Property files are always read and written as Latin-1; anything outside it
# is escaped as \uXXXX on write.
PROPERTIES_ENCODING = "iso-8859-1"

UPDATED_AT_FORMAT = "%a %b %d %H:%M:%S %Z %Y"

# Metadata identifier looked up to decide whether a project is open.
PROJECT_IDENTIFIER = "MID:project#the_project"

# Build files whose presence marks a directory as a project root.
PROJECT_MARKERS: tuple[str, ...] = ("pom.xml",)

DEFAULT_LOGICAL_PATH = LogicalPath.SRC_MAIN_RESOURCES

# Maven-style directory for each logical root, relative to the project root.
DEFAULT_LAYOUT: dict[LogicalPath, str] = {
    LogicalPath.ROOT: "",
    LogicalPath.SRC_MAIN_JAVA: "src/main/java",
    LogicalPath.SRC_MAIN_RESOURCES: "src/main/resources",
    LogicalPath.SRC_TEST_JAVA: "src/test/java",
    LogicalPath.SRC_TEST_RESOURCES: "src/test/resources",
    LogicalPath.SRC_MAIN_WEBAPP: "src/main/webapp",
    LogicalPath.SPRING_CONFIG_ROOT: "src/main/resources/META-INF/spring",
}
