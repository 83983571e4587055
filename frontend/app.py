from flask import Flask, render_template, request, redirect, url_for, flash, session
import logging
from datetime import datetime
from urllib.parse import quote

from frontend.config import Config
from frontend.utils import api_request, api_error_message
from frontend.capture import CameraSource, CaptureError, UploadedImageSource, scan_barcode
from frontend.scan_flow import ScanSession, LookupFailed, lookup_scanned

app = Flask(__name__)
app.config.from_object(Config)
app.secret_key = app.config['SECRET_KEY']

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)


@app.template_filter('format_datetime')
def format_datetime_filter(s):
    if not s: return ""
    try:
        dt_obj = datetime.fromisoformat(str(s).replace('Z', '+00:00'))
        return dt_obj.strftime('%d/%m/%Y %H:%M')
    except (ValueError, TypeError): return s


@app.template_filter('format_currency')
def format_currency_filter(value):
    try:
        return f"{float(value):,.2f}"
    except (ValueError, TypeError): return value


def _path(barcode):
    return quote(barcode, safe='')


def get_scan():
    return ScanSession.from_dict(session.get('scan'))


def save_scan(scan):
    session['scan'] = scan.to_dict()


def load_dashboard(category=None, low_stock=False):
    """Stats, product list and categories: everything the dashboard shows."""
    stats = {'totalProducts': 0, 'totalValue': 0, 'lowStockCount': 0, 'categoriesCount': 0}
    products = []
    categories = []

    stats_response = api_request('/stats')
    if stats_response is not None and stats_response.status_code == 200:
        stats = stats_response.json()

    params = {'category': category, 'lowStock': 'true' if low_stock else None}
    params = {k: v for k, v in params.items() if v}
    products_response = api_request('/products', params=params)
    if products_response is not None and products_response.status_code == 200:
        products = products_response.json()
    else:
        flash(api_error_message(products_response, "Error loading products."), "error")

    categories_response = api_request('/categories')
    if categories_response is not None and categories_response.status_code == 200:
        categories = categories_response.json()

    return stats, products, categories


def load_categories():
    response = api_request('/categories')
    if response is not None and response.status_code == 200:
        return response.json()
    return []


@app.route('/')
def index():
    """Dashboard: statistics and the product list."""
    category = request.args.get('category', '').strip()
    low_stock = request.args.get('lowStock') == 'true'
    stats, products, categories = load_dashboard(category=category, low_stock=low_stock)
    return render_template(
        'index.html',
        stats=stats,
        products=products,
        categories=categories,
        category=category,
        low_stock=low_stock,
    )


# --- Scan flow ---

@app.route('/scan')
def scan_page():
    return render_template('scan/scan.html', scan=get_scan())


def _run_scan(source):
    scan = get_scan()
    scan.cancel().start()
    save_scan(scan)
    try:
        barcode = scan_barcode(source)
    except CaptureError as e:
        save_scan(scan.cancel())
        flash(str(e), "error")
        return redirect(url_for('scan_page'))
    return _resolve_barcode(scan, barcode)


def _resolve_barcode(scan, barcode):
    try:
        product = lookup_scanned(scan, barcode)
    except LookupFailed as e:
        save_scan(scan)
        flash(str(e), "error")
        return redirect(url_for('scan_page'))

    save_scan(scan)
    if product is not None:
        return redirect(url_for('product_detail', barcode=barcode))
    flash(f"New barcode {barcode}. Fill in the product details.", "info")
    return redirect(url_for('product_new', barcode=barcode))


@app.route('/scan/upload', methods=['POST'])
def scan_upload():
    upload = request.files.get('image')
    if upload is None or not upload.filename:
        flash("Choose a photo of the barcode first.", "error")
        return redirect(url_for('scan_page'))
    return _run_scan(UploadedImageSource(upload.stream))


@app.route('/scan/camera', methods=['POST'])
def scan_camera():
    source = CameraSource(
        index=app.config['CAMERA_INDEX'],
        max_frames=app.config['CAMERA_MAX_FRAMES'],
    )
    return _run_scan(source)


@app.route('/scan/manual', methods=['POST'])
def scan_manual():
    barcode = request.form.get('barcode', '').strip()
    if not barcode:
        flash("Type a barcode first.", "error")
        return redirect(url_for('scan_page'))
    scan = get_scan()
    scan.cancel().start()
    return _resolve_barcode(scan, barcode)


@app.route('/scan/cancel', methods=['POST'])
def scan_cancel():
    save_scan(get_scan().cancel())
    return redirect(url_for('index'))


# --- Products ---

def _to_number(value, cast):
    value = (value or '').strip().replace(',', '.')
    if not value:
        return None
    return cast(value)


def _product_form_data(form):
    data = {
        "name": form.get("name", "").strip(),
        "category": form.get("category", "").strip(),
        "cost": _to_number(form.get("cost"), float),
        "stock": _to_number(form.get("stock"), int),
        "minStock": _to_number(form.get("minStock"), int),
    }
    return {k: v for k, v in data.items() if v is not None}


@app.route('/products/<path:barcode>/view')
def product_detail(barcode):
    response = api_request(f"/products/barcode/{_path(barcode)}")
    if response is None or response.status_code != 200:
        flash(api_error_message(response, "Error loading product."), "error")
        return redirect(url_for('index'))

    data = response.json()
    if not data.get("exists"):
        flash(f"No product with barcode {barcode}.", "error")
        return redirect(url_for('index'))
    return render_template('products/detail.html', product=data["product"])


@app.route('/products/new')
def product_new():
    barcode = request.args.get('barcode', '')
    return render_template(
        'products/form.html', product=None, barcode=barcode, categories=load_categories()
    )


@app.route('/products/save', methods=['POST'])
def product_save():
    barcode = request.form.get('barcode', '').strip()
    try:
        product_data = _product_form_data(request.form)
    except ValueError:
        flash("Cost, stock and minimum stock must be numbers.", "error")
        return redirect(url_for('product_new', barcode=barcode))
    product_data["barcode"] = barcode

    response = api_request('/products', method='POST', json=product_data)
    if response is not None and response.status_code == 201:
        save_scan(get_scan().cancel())
        flash("Product added successfully!", "success")
        return redirect(url_for('product_detail', barcode=barcode))

    flash(api_error_message(response, "Error adding product."), "error")
    return redirect(url_for('product_new', barcode=barcode))


@app.route('/products/<path:barcode>/stock', methods=['POST'])
def product_stock(barcode):
    action = request.form.get('action')
    try:
        quantity = _to_number(request.form.get('quantity'), int)
    except ValueError:
        flash("Quantity must be a whole number.", "error")
        return redirect(url_for('product_detail', barcode=barcode))

    payload = {"action": action, "quantity": 1 if quantity is None else quantity}
    response = api_request(f"/products/{_path(barcode)}/stock", method='PATCH', json=payload)
    if response is None or response.status_code != 200:
        flash(api_error_message(response, "Error updating stock."), "error")
    return redirect(url_for('product_detail', barcode=barcode))


@app.route('/products/<path:barcode>/edit', methods=['GET', 'POST'])
def product_edit(barcode):
    if request.method == 'POST':
        try:
            product_data = _product_form_data(request.form)
        except ValueError:
            flash("Cost, stock and minimum stock must be numbers.", "error")
            return redirect(url_for('product_edit', barcode=barcode))

        response = api_request(f"/products/{_path(barcode)}", method='PUT', json=product_data)
        if response is not None and response.status_code == 200:
            flash("Product updated successfully!", "success")
            return redirect(url_for('product_detail', barcode=barcode))
        flash(api_error_message(response, "Error updating product."), "error")
        return redirect(url_for('product_edit', barcode=barcode))

    response = api_request(f"/products/barcode/{_path(barcode)}")
    if response is None or response.status_code != 200:
        flash(api_error_message(response, "Error loading product."), "error")
        return redirect(url_for('index'))

    data = response.json()
    if not data.get("exists"):
        flash(f"No product with barcode {barcode}.", "error")
        return redirect(url_for('index'))
    return render_template(
        'products/form.html',
        product=data["product"],
        barcode=barcode,
        categories=load_categories(),
    )


@app.route('/products/<path:barcode>/delete', methods=['POST'])
def product_delete(barcode):
    response = api_request(f"/products/{_path(barcode)}", method='DELETE')
    if response is not None and response.status_code == 200:
        flash("Product deleted successfully!", "success")
        return redirect(url_for('index'))
    flash(api_error_message(response, "Error deleting product."), "error")
    return redirect(url_for('index'))


if __name__ == '__main__':
    app.run(debug=False, host='0.0.0.0', port=app.config['FRONTEND_PORT'])
