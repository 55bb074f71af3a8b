import csv
import io


def se_mailing_csv_str(address) -> str:
    """Format an address as one CSV line for Swedish postal mailings.

    Columns: street address, post code, city, kommun, region, country.
    Missing parts are written as empty strings.
    """
    if address is None:
        return ",,,,,"
    row = [
        address.street_address or "",
        address.post_code or "",
        address.city or "",
        address.kommun.name if address.kommun else "",
        address.region.name if address.region else "",
        address.country or "",
    ]
    buffer = io.StringIO()
    csv.writer(buffer, lineterminator="").writerow(row)
    return buffer.getvalue()
