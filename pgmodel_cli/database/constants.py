"""Storage type classification lists.

A storage type decides which size options a column may carry: precision
and scale, character length, or display width.
"""

COLUMN_TYPES_WITH_PRECISION = (
    "float",
    "double",
    "dec",
    "decimal",
    "numeric",
    "real",
    "double precision",
    "number",
    "datetime",
    "datetime2",
    "datetimeoffset",
    "time",
    "time with time zone",
    "time without time zone",
    "timestamp",
    "timestamp without time zone",
    "timestamp with time zone",
    "timestamp with local time zone",
)

COLUMN_TYPES_WITH_LENGTH = (
    "character varying",
    "varying character",
    "char varying",
    "nvarchar",
    "national varchar",
    "character",
    "native character",
    "varchar",
    "char",
    "nchar",
    "national char",
    "varchar2",
    "nvarchar2",
    "raw",
    "binary",
    "varbinary",
    "string",
)

COLUMN_TYPES_WITH_WIDTH = (
    "tinyint",
    "smallint",
    "mediumint",
    "int",
    "bigint",
)
