import io
import os

from flask import Flask, request, jsonify, send_file, url_for
from flask_cors import CORS
from werkzeug.utils import secure_filename

from errors import HuffmanError
from file_compression import COMPRESSED_EXT, compress_file, decompress_file
from huffman import compress, decompress

# -----------------------------------------------------------
# PATH CONFIGURATION
# -----------------------------------------------------------
BASE_DIR = os.path.abspath(os.path.dirname(__file__))
DATA_DIR = os.environ.get("HUFFPACK_DATA_DIR", os.path.join(BASE_DIR, "data"))
UPLOAD_DIR = os.path.join(DATA_DIR, "files")
MAX_UPLOAD_MB = int(os.environ.get("HUFFPACK_MAX_UPLOAD_MB", "64"))

# -----------------------------------------------------------
# FLASK APP SETUP
# -----------------------------------------------------------
app = Flask(__name__)
app.config.update(
    UPLOAD_DIR=UPLOAD_DIR,
    MAX_CONTENT_LENGTH=MAX_UPLOAD_MB * 1024 * 1024,
)
CORS(app)

# -----------------------------------------------------------
# HELPER FUNCTIONS
# -----------------------------------------------------------
def upload_dir():
    path = app.config["UPLOAD_DIR"]
    os.makedirs(path, exist_ok=True)
    return path


def error_response(message, status):
    return jsonify({"success": False, "error": message}), status


def uploaded_file():
    """Returns (file, safe filename) for the multipart 'file' field, or (None, None)."""
    file = request.files.get("file")
    if not file or not file.filename:
        return None, None
    filename = secure_filename(file.filename)
    if not filename:
        return None, None
    return file, filename

# -----------------------------------------------------------
# ROUTES
# -----------------------------------------------------------
@app.route("/")
def home():
    return jsonify({
        "service": "huffpack",
        "endpoints": {
            "compress_file": url_for("compress_file_route"),
            "decompress_file": url_for("decompress_file_route"),
            "compress": url_for("compress_raw"),
            "decompress": url_for("decompress_raw"),
        },
    })


@app.route("/compress_file", methods=["POST"])
def compress_file_route():
    file, filename = uploaded_file()
    if not file:
        return error_response("No file uploaded", 400)

    input_path = os.path.join(upload_dir(), filename)
    compressed_filename = filename + COMPRESSED_EXT
    compressed_path = os.path.join(upload_dir(), compressed_filename)

    try:
        file.save(input_path)
        stats = compress_file(input_path, compressed_path)
    except HuffmanError as e:
        return error_response(str(e), 400)
    except Exception:
        app.logger.exception("Error in /compress_file")
        return error_response("Internal server error", 500)

    return jsonify({
        "success": True,
        "filename": filename,
        "compressed_filename": compressed_filename,
        "original_size": stats.original_size,
        "compressed_size": stats.compressed_size,
        "distinct_symbols": stats.distinct_symbols,
        "saved": stats.saved,
        "saved_percent": stats.saved_percent,
        "download_url": url_for("download_file", filename=compressed_filename),
    })


@app.route("/decompress_file", methods=["POST"])
def decompress_file_route():
    file, filename = uploaded_file()
    if not file:
        return error_response("No file uploaded", 400)
    if not filename.endswith(COMPRESSED_EXT) or filename == COMPRESSED_EXT:
        return error_response("Invalid file type", 400)

    input_path = os.path.join(upload_dir(), filename)
    output_filename = filename[:-len(COMPRESSED_EXT)]  # keep original filename
    output_path = os.path.join(upload_dir(), output_filename)

    try:
        file.save(input_path)
        decompress_file(input_path, output_path)
    except HuffmanError as e:
        return error_response(str(e), 400)
    except Exception:
        app.logger.exception("Error in /decompress_file")
        return error_response("Internal server error", 500)

    return jsonify({
        "success": True,
        "original_huff": filename,
        "decompressed_file": output_filename,
        "decompressed_size": os.path.getsize(output_path),
        "download_url": url_for("download_file", filename=output_filename),
    })


@app.route("/download/<filename>")
def download_file(filename):
    file_path = os.path.join(upload_dir(), secure_filename(filename))
    if not os.path.isfile(file_path):
        return error_response("File not found", 404)

    return send_file(
        file_path,
        as_attachment=True,
        download_name=filename,
        mimetype="application/octet-stream",
    )

# -----------------------------------------------------------
# RAW API ROUTES
# -----------------------------------------------------------
@app.route("/api/compress", methods=["POST"])
def compress_raw():
    try:
        data = compress(request.get_data())
    except HuffmanError as e:
        return error_response(str(e), 400)
    return send_file(io.BytesIO(data), mimetype="application/octet-stream",
                     as_attachment=True, download_name="data" + COMPRESSED_EXT)


@app.route("/api/decompress", methods=["POST"])
def decompress_raw():
    try:
        data = decompress(request.get_data())
    except HuffmanError as e:
        return error_response(str(e), 400)
    return send_file(io.BytesIO(data), mimetype="application/octet-stream",
                     as_attachment=True, download_name="data")

# -----------------------------------------------------------
if __name__ == "__main__":
    app.run(debug=True)
