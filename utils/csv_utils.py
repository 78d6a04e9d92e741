"""
CSV export helpers for the security log

VERSION HISTORY:
2.0.0 - Security log export - 10/19/26
      CHANGES:
      - security_log_to_csv() exports activity rows with formula
        neutralization applied to every text column
1.0.0 - CSV injection protection - 11/12/25
"""
import pandas as pd

# Cells starting with these are evaluated as formulas by spreadsheet apps
FORMULA_PREFIXES = ('=', '+', '-', '@', '\t', '\r')


def sanitize_csv_value(val):
    """
    Neutralize a cell that a spreadsheet would run as a formula

    Example:
        >>> sanitize_csv_value("=1+1")
        "'=1+1"
    """
    if pd.isna(val):
        return val

    val = str(val).strip()
    if val.startswith(FORMULA_PREFIXES):
        return "'" + val
    return val


def sanitize_dataframe_for_csv(df: pd.DataFrame) -> pd.DataFrame:
    """Return a copy of df with every text column sanitized"""
    df_copy = df.copy()
    for col in df_copy.select_dtypes(include='object').columns:
        df_copy[col] = df_copy[col].apply(sanitize_csv_value)
    return df_copy


def security_log_to_csv(df: pd.DataFrame) -> str:
    """Serialize security log rows for download"""
    return sanitize_dataframe_for_csv(df).to_csv(index=False)
